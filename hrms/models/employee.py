"""
Employee Model
Tracks employee records and information
"""
from datetime import datetime, date
from hrms import db


EMPLOYEE_STATUSES = ('active', 'inactive', 'terminated', 'retired')


class Employee(db.Model):
    """Employee model for HR records"""
    __tablename__ = 'employees'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, unique=True, index=True)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True, index=True)
    position_id = db.Column(db.Integer, db.ForeignKey('positions.id', ondelete='SET NULL'), nullable=True, index=True)
    manager_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True)

    # Employee identification
    employment_number = db.Column(db.String(50), unique=True, nullable=False, index=True)  # e.g., EMP-001

    # Personal information
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    gender = db.Column(db.String(10))
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50))
    date_of_birth = db.Column(db.Date)
    nationality = db.Column(db.String(100))
    physical_address = db.Column(db.Text)
    qualifications = db.Column(db.Text)

    # Employment information
    hire_date = db.Column(db.Date, nullable=False)
    salary = db.Column(db.Numeric(12, 2), default=0)
    status = db.Column(db.String(20), nullable=False, default='active', index=True)  # active, inactive, terminated, retired
    suspended = db.Column(db.Boolean, default=False, nullable=False)

    # Termination
    termination_date = db.Column(db.Date)
    termination_reason = db.Column(db.Text)
    severance = db.Column(db.Numeric(12, 2))
    exit_interview = db.Column(db.Text)

    # Soft delete
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    deleted_at = db.Column(db.DateTime)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = db.relationship('User', backref=db.backref('employee_record', uselist=False))
    section = db.relationship('Section', back_populates='employees')
    position = db.relationship('Position')
    manager = db.relationship('Employee', remote_side=[id], backref=db.backref('direct_reports', lazy='dynamic'))
    details = db.relationship('EmployeeDetails', back_populates='employee', uselist=False,
                              cascade='all, delete-orphan')
    leave_requests = db.relationship('LeaveRequest', back_populates='employee', lazy='dynamic',
                                     cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Employee {self.employment_number}: {self.full_name}>'

    @property
    def full_name(self):
        """Get employee's full name"""
        return f'{self.first_name} {self.last_name}'

    @property
    def position_title(self):
        return self.position.position_title if self.position else 'Unknown'

    @property
    def section_name(self):
        return self.section.section_name if self.section else 'Unknown'

    @property
    def manager_name(self):
        return self.manager.full_name if self.manager else None

    def is_on_leave(self, on_date=None):
        """Whether an approved leave covers the given date (default today)"""
        from hrms.models.leave_request import LeaveRequest

        on_date = on_date or date.today()
        return self.leave_requests.filter(
            LeaveRequest.status == 'approved',
            LeaveRequest.start_date <= on_date,
            LeaveRequest.end_date >= on_date
        ).count() > 0

    @staticmethod
    def generate_employment_number():
        """
        Generate the next employment number

        Returns:
            String like 'EMP-001', 'EMP-002', etc.
        """
        last_employee = Employee.query.order_by(Employee.id.desc()).first()

        if not last_employee or not last_employee.employment_number:
            number = 1
        else:
            # Extract number from format like 'EMP-001'
            try:
                parts = last_employee.employment_number.split('-')
                if len(parts) == 2:
                    number = int(parts[1]) + 1
                else:
                    number = last_employee.id + 1
            except (ValueError, IndexError):
                number = last_employee.id + 1

        candidate = f'EMP-{number:03d}'
        while Employee.query.filter_by(employment_number=candidate).first():
            number += 1
            candidate = f'EMP-{number:03d}'
        return candidate

    def to_dict(self, include_relations=True):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'employment_number': self.employment_number,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'gender': self.gender,
            'email': self.email,
            'phone': self.phone,
            'date_of_birth': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'nationality': self.nationality,
            'physical_address': self.physical_address,
            'qualifications': self.qualifications,
            'section_id': self.section_id,
            'position_id': self.position_id,
            'manager_id': self.manager_id,
            'hire_date': self.hire_date.isoformat() if self.hire_date else None,
            'salary': float(self.salary) if self.salary is not None else None,
            'status': self.status,
            'suspended': self.suspended,
            'is_active': self.is_active,
            'termination_date': self.termination_date.isoformat() if self.termination_date else None,
            'termination_reason': self.termination_reason,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_relations:
            data['position_title'] = self.position_title
            data['section_name'] = self.section_name
            data['manager_name'] = self.manager_name
        return data
