"""initial_hr_schema

Revision ID: 0001_initial_hr_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_hr_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    # Accounts
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=True),
        sa.Column('last_name', sa.String(length=80), nullable=True),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='employee'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('email_verified_at', sa.DateTime(), nullable=True),
        sa.Column('locked_until', sa.DateTime(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('verification_token', sa.String(length=100), nullable=True),
        sa.Column('verification_token_expires', sa.DateTime(), nullable=True),
        sa.Column('reset_token', sa.String(length=100), nullable=True),
        sa.Column('reset_token_expires', sa.DateTime(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_verification_token', 'users', ['verification_token'], unique=True)
    op.create_index('ix_users_reset_token', 'users', ['reset_token'], unique=True)

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('event_status', sa.String(length=20), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('resource_type', sa.String(length=50), nullable=True),
        sa.Column('resource_id', sa.Integer(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_audit_logs_event_type', 'audit_logs', ['event_type'])
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])

    # Organisation
    op.create_table(
        'ministries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ministry_name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps()
    )

    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ministry_id', sa.Integer(), sa.ForeignKey('ministries.id', ondelete='SET NULL'), nullable=True),
        sa.Column('section_name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('employee_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_sections_section_name', 'sections', ['section_name'])

    op.create_table(
        'positions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('position_title', sa.String(length=200), nullable=False),
        sa.Column('salary_grade', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )

    # Employees
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('position_id', sa.Integer(), sa.ForeignKey('positions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('manager_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('employment_number', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('nationality', sa.String(length=100), nullable=True),
        sa.Column('physical_address', sa.Text(), nullable=True),
        sa.Column('qualifications', sa.Text(), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=False),
        sa.Column('salary', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('suspended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('termination_date', sa.Date(), nullable=True),
        sa.Column('termination_reason', sa.Text(), nullable=True),
        sa.Column('severance', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('exit_interview', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_employees_user_id', 'employees', ['user_id'], unique=True)
    op.create_index('ix_employees_employment_number', 'employees', ['employment_number'], unique=True)
    op.create_index('ix_employees_section_id', 'employees', ['section_id'])
    op.create_index('ix_employees_status', 'employees', ['status'])
    op.create_index('ix_employees_is_active', 'employees', ['is_active'])

    op.create_table(
        'employee_details',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'),
                  nullable=False, unique=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('emergency_contact', sa.JSON(), nullable=True),
        sa.Column('banking_info', sa.JSON(), nullable=True),
        sa.Column('additional_info', sa.JSON(), nullable=True),
        *_timestamps()
    )

    op.create_table(
        'employee_activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_employee_activities_employee_id', 'employee_activities', ['employee_id'])

    op.create_table(
        'employee_documents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('national_id', sa.String(length=100), nullable=False),
        sa.Column('national_id_document', sa.String(length=500), nullable=True),
        sa.Column('passport_photo', sa.String(length=500), nullable=False),
        sa.Column('academic_certificates', sa.JSON(), nullable=False),
        sa.Column('police_clearance', sa.String(length=500), nullable=True),
        sa.Column('medical_certificate', sa.String(length=500), nullable=True),
        sa.Column('driver_license', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_employee_documents_employee_id', 'employee_documents', ['employee_id'])

    # Attendance and leave
    op.create_table(
        'time_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('check_in', sa.DateTime(), nullable=True),
        sa.Column('check_out', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='present'),
        sa.Column('hours_worked', sa.Float(), nullable=True),
        sa.Column('overtime', sa.Float(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('employee_id', 'date', name='uq_time_entry_employee_date'),
    )
    op.create_index('ix_time_entries_date', 'time_entries', ['date'])

    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type', sa.String(length=20), nullable=False, server_default='annual'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('days', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('applied_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('approved_by', sa.String(length=200), nullable=True),
        sa.Column('approved_date', sa.DateTime(), nullable=True),
        sa.Column('approval_comments', sa.Text(), nullable=True),
        sa.Column('rejected_by', sa.String(length=200), nullable=True),
        sa.Column('rejected_date', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('part_a', sa.JSON(), nullable=True),
        sa.Column('part_b', sa.JSON(), nullable=True),
        sa.Column('part_c', sa.JSON(), nullable=True),
        sa.Column('part_d', sa.JSON(), nullable=True),
        *_timestamps()
    )
    op.create_index('ix_leave_requests_employee_id', 'leave_requests', ['employee_id'])
    op.create_index('ix_leave_requests_status', 'leave_requests', ['status'])
    op.create_index('ix_leave_requests_start_date', 'leave_requests', ['start_date'])

    op.create_table(
        'leave_balances',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type', sa.String(length=20), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('allocated', sa.Float(), nullable=False, server_default='0'),
        sa.Column('used', sa.Float(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.UniqueConstraint('employee_id', 'leave_type', 'year', name='uq_leave_balance_employee_type_year'),
    )

    op.create_table(
        'concurrency_forms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('form_type', sa.String(length=50), nullable=False, server_default='concurrency_declaration'),
        sa.Column('personal_info', sa.JSON(), nullable=True),
        sa.Column('outside_employment', sa.JSON(), nullable=True),
        sa.Column('conflict_of_interest', sa.JSON(), nullable=True),
        sa.Column('gifts_benefits', sa.JSON(), nullable=True),
        sa.Column('declaration', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='draft'),
        sa.Column('submission_date', sa.DateTime(), nullable=True),
        sa.Column('review_date', sa.DateTime(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=200), nullable=True),
        sa.Column('reviewer_notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps()
    )
    op.create_index('ix_concurrency_forms_employee_id', 'concurrency_forms', ['employee_id'])
    op.create_index('ix_concurrency_forms_status', 'concurrency_forms', ['status'])

    # Performance, payroll, benefits
    op.create_table(
        'performance_reviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reviewer_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('review_date', sa.Date(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('review', sa.Text(), nullable=True),
        sa.Column('strengths', sa.Text(), nullable=True),
        sa.Column('areas_for_improvement', sa.Text(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        *_timestamps()
    )

    op.create_table(
        'payrolls',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('salary', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('bonus', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('deductions', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('pay_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False, server_default='bank'),
        *_timestamps()
    )
    op.create_index('ix_payrolls_employee_id', 'payrolls', ['employee_id'])

    op.create_table(
        'benefits',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('benefit_type', sa.String(length=50), nullable=True),
        sa.Column('provider', sa.String(length=200), nullable=True),
        sa.Column('cost', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps()
    )

    op.create_table(
        'employee_benefits',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('benefit_id', sa.Integer(), sa.ForeignKey('benefits.id', ondelete='CASCADE'), nullable=False),
        sa.Column('enrolled_on', sa.Date(), nullable=False),
        sa.UniqueConstraint('employee_id', 'benefit_id', name='uq_employee_benefit'),
    )

    # Recruitment
    op.create_table(
        'job_postings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('employment_type', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('salary_range_min', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('salary_range_max', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        *_timestamps()
    )

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('job_posting_id', sa.Integer(), sa.ForeignKey('job_postings.id', ondelete='SET NULL'), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('position', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='applied'),
        sa.Column('applied_date', sa.Date(), nullable=False),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.JSON(), nullable=True),
        *_timestamps()
    )

    op.create_table(
        'interviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('interview_type', sa.String(length=50), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(length=500), nullable=True),
        sa.Column('interviewers', sa.JSON(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        *_timestamps()
    )


def downgrade():
    for table in ('interviews', 'candidates', 'job_postings', 'employee_benefits', 'benefits',
                  'payrolls', 'performance_reviews', 'concurrency_forms', 'leave_balances',
                  'leave_requests', 'time_entries', 'employee_documents', 'employee_activities',
                  'employee_details', 'employees', 'positions', 'sections', 'ministries',
                  'audit_logs', 'users'):
        op.drop_table(table)
