"""
Concurrency Service
Conflict-of-interest declarations: drafting, submission and review
"""
from typing import List, Optional, Dict
from flask import current_app
from sqlalchemy import func
from hrms import db
from hrms.models.employee import Employee
from hrms.models.concurrency_form import ConcurrencyForm, CONCURRENCY_STATUSES
from hrms.models.audit_log import AuditLog
from hrms.schemas import DeclarationSchema
from hrms.services.errors import InvalidStateError, NotFoundError, ServiceError
from hrms.services.activity_service import activity_service
from hrms.services.email_service import email_service


FORM_SECTIONS = ('personal_info', 'outside_employment', 'conflict_of_interest', 'gifts_benefits', 'declaration')


class ConcurrencyService:

    def create_concurrency_form(self, employee: Employee, data: dict) -> ConcurrencyForm:
        """
        Create a draft declaration

        Personal info defaults to the employee's own record.
        """
        personal_info = {
            'full_name': employee.full_name,
            'position': employee.position_title,
            'department': employee.section_name,
            'employee_id': employee.employment_number,
        }
        personal_info.update({k: v for k, v in (data.get('personal_info') or {}).items() if v})

        form = ConcurrencyForm(employee_id=employee.id, status='draft', personal_info=personal_info)
        for section in FORM_SECTIONS[1:]:
            setattr(form, section, data.get(section) or {})

        db.session.add(form)
        db.session.commit()
        current_app.logger.info(f'Concurrency form {form.id} drafted for employee {employee.id}')
        return form

    def get_concurrency_form_by_id(self, form_id: int) -> ConcurrencyForm:
        form = db.session.get(ConcurrencyForm, form_id)
        if not form or not form.is_active:
            raise NotFoundError('Concurrency form not found')
        return form

    def update_concurrency_form(self, form_id: int, data: dict) -> ConcurrencyForm:
        form = self.get_concurrency_form_by_id(form_id)
        if not form.is_editable:
            raise InvalidStateError(f'Form cannot be edited while {form.status}')

        for section in FORM_SECTIONS:
            if data.get(section) is not None:
                setattr(form, section, dict(data[section]))

        db.session.commit()
        return form

    def submit_concurrency_form(self, form_id: int) -> ConcurrencyForm:
        """
        Move a draft (or a form sent back for revision) to submitted

        Raises:
            InvalidStateError: Wrong status
            ServiceError: Declaration not confirmed and signed
        """
        form = self.get_concurrency_form_by_id(form_id)
        if not form.is_editable:
            raise InvalidStateError(f'Form is already {form.status}')

        errors = DeclarationSchema(**(form.declaration or {})).submission_errors()
        if errors:
            raise ServiceError('; '.join(errors))

        resubmission = form.status == 'requires_revision'
        form.submit()
        activity_service.add_employee_activity(
            form.employee_id, 'concurrency',
            'Resubmitted concurrency declaration' if resubmission else 'Submitted concurrency declaration',
            commit=False
        )
        db.session.commit()
        return form

    def review_concurrency_form(self, form_id: int, decision: str, reviewer_name: str,
                                reviewer_notes: Optional[str] = None,
                                reviewer_id: Optional[int] = None) -> ConcurrencyForm:
        form = self.get_concurrency_form_by_id(form_id)
        if form.status != 'submitted':
            raise InvalidStateError(f'Only submitted forms can be reviewed (form is {form.status})')
        if decision not in ('approved', 'rejected', 'requires_revision'):
            raise ServiceError('Invalid review decision')

        form.review(decision, reviewer_name, reviewer_notes)
        activity_service.add_employee_activity(
            form.employee_id, 'concurrency',
            f"Concurrency declaration {decision.replace('_', ' ')} by {reviewer_name}",
            commit=False
        )
        AuditLog.log_event('concurrency_reviewed', user_id=reviewer_id, resource_type='concurrency_form',
                           resource_id=form.id, details={'decision': decision})
        db.session.commit()

        email_service.send_concurrency_review_email(form)
        return form

    def delete_concurrency_form(self, form_id: int) -> ConcurrencyForm:
        form = self.get_concurrency_form_by_id(form_id)
        form.is_active = False
        db.session.commit()
        return form

    def get_concurrency_forms_by_employee(self, employee_id: int) -> List[ConcurrencyForm]:
        return ConcurrencyForm.query.filter_by(employee_id=employee_id, is_active=True) \
            .order_by(ConcurrencyForm.created_at.desc(), ConcurrencyForm.id.desc()).all()

    def get_all_concurrency_forms(self, status: Optional[str] = None,
                                  employee_id: Optional[int] = None) -> List[ConcurrencyForm]:
        query = ConcurrencyForm.query.filter_by(is_active=True)
        if status:
            query = query.filter_by(status=status)
        if employee_id:
            query = query.filter_by(employee_id=employee_id)
        return query.order_by(ConcurrencyForm.created_at.desc(), ConcurrencyForm.id.desc()).all()

    def get_concurrency_form_stats(self, employee_id: Optional[int] = None) -> Dict:
        query = db.session.query(ConcurrencyForm.status, func.count(ConcurrencyForm.id)) \
            .filter(ConcurrencyForm.is_active.is_(True))
        if employee_id:
            query = query.filter(ConcurrencyForm.employee_id == employee_id)

        stats = {status: 0 for status in CONCURRENCY_STATUSES}
        for status, count in query.group_by(ConcurrencyForm.status).all():
            stats[status] = count
        stats['total'] = sum(stats.values())
        return stats


# Singleton instance
concurrency_service = ConcurrencyService()
