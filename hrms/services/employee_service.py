"""
Employee Service
Employee records, extended details and the complete profile view
"""
from datetime import datetime, date
from typing import List, Optional, Dict
from flask import current_app
from sqlalchemy import or_
from hrms import db
from hrms.models.employee import Employee
from hrms.models.employee_details import EmployeeDetails, DETAIL_SECTIONS
from hrms.models.employee_document import EmployeeDocument
from hrms.models.employee_activity import EmployeeActivity
from hrms.models.leave_request import LeaveRequest
from hrms.models.leave_balance import LeaveBalance
from hrms.models.audit_log import AuditLog
from hrms.models.user import User
from hrms.services.errors import ConflictError, NotFoundError, ServiceError
from hrms.services.organization_service import organization_service
from hrms.utils.input_validators import sanitize_sql_like_pattern, clean_search_query


EMPLOYEE_FIELDS = (
    'first_name', 'last_name', 'employment_number', 'gender', 'email', 'phone',
    'section_id', 'position_id', 'manager_id', 'hire_date', 'date_of_birth', 'salary',
    'status', 'suspended', 'qualifications', 'physical_address', 'nationality',
)


class EmployeeService:
    """Service for employee records"""

    # ===== EMPLOYEES =====

    def _check_references(self, data: dict, employee_id: Optional[int] = None):
        """Validate section/position/manager ids present in the payload"""
        if data.get('section_id'):
            organization_service.get_section_by_id(data['section_id'])
        if data.get('position_id'):
            organization_service.get_position_by_id(data['position_id'])
        if data.get('manager_id'):
            if employee_id and data['manager_id'] == employee_id:
                raise ServiceError('An employee cannot be their own manager')
            manager = db.session.get(Employee, data['manager_id'])
            if not manager or not manager.is_active:
                raise NotFoundError('Manager not found')
        if data.get('employment_number'):
            existing = Employee.query.filter_by(employment_number=data['employment_number']).first()
            if existing and existing.id != employee_id:
                raise ConflictError('Employment number already exists')

    def create_employee(self, data: dict) -> Employee:
        """
        Create an employee record

        Args:
            data: Validated EmployeeSchema payload

        Returns:
            The new Employee
        """
        self._check_references(data)

        employee = Employee(**{k: data.get(k) for k in EMPLOYEE_FIELDS if data.get(k) is not None})
        if not employee.employment_number:
            employee.employment_number = Employee.generate_employment_number()

        if data.get('user_id'):
            self._assert_user_linkable(data['user_id'])
            employee.user_id = data['user_id']

        db.session.add(employee)
        db.session.commit()

        if employee.section_id:
            organization_service.update_section_employee_count(employee.section_id)

        current_app.logger.info(f'Employee {employee.employment_number} created')
        return employee

    def get_employee_by_id(self, employee_id: int, include_inactive: bool = False) -> Employee:
        employee = db.session.get(Employee, employee_id)
        if not employee or (not employee.is_active and not include_inactive):
            raise NotFoundError('Employee not found')
        return employee

    def get_employee_by_user_id(self, user_id: int) -> Employee:
        employee = Employee.query.filter_by(user_id=user_id, is_active=True).first()
        if not employee:
            raise NotFoundError('No employee record is linked to this user')
        return employee

    def update_employee(self, employee_id: int, data: dict) -> Employee:
        employee = self.get_employee_by_id(employee_id)
        self._check_references(data, employee_id=employee.id)

        old_section_id = employee.section_id
        for field in EMPLOYEE_FIELDS:
            if field in data and data[field] is not None:
                setattr(employee, field, data[field])

        db.session.commit()

        for section_id in {old_section_id, employee.section_id}:
            if section_id:
                organization_service.update_section_employee_count(section_id)
        return employee

    def delete_employee(self, employee_id: int) -> Employee:
        """Soft delete: the record stays for history but drops out of listings"""
        employee = self.get_employee_by_id(employee_id)
        employee.is_active = False
        employee.deleted_at = datetime.utcnow()
        db.session.commit()

        if employee.section_id:
            organization_service.update_section_employee_count(employee.section_id)
        return employee

    def get_all_employees(self, include_inactive: bool = False) -> List[Employee]:
        query = Employee.query
        if not include_inactive:
            query = query.filter_by(is_active=True)
        return query.order_by(Employee.last_name, Employee.first_name).all()

    def get_employees_by_section(self, section_id: int) -> List[Employee]:
        organization_service.get_section_by_id(section_id)
        return Employee.query.filter_by(section_id=section_id, is_active=True) \
            .order_by(Employee.last_name, Employee.first_name).all()

    def _assert_user_linkable(self, user_id: int, employee_id: Optional[int] = None):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError('User not found')
        linked = Employee.query.filter_by(user_id=user_id).first()
        if linked and linked.id != employee_id:
            raise ConflictError('User is already linked to another employee')

    def link_employee_with_user(self, employee_id: int, user_id: int) -> Employee:
        employee = self.get_employee_by_id(employee_id)
        self._assert_user_linkable(user_id, employee_id=employee.id)
        employee.user_id = user_id
        db.session.commit()
        return employee

    def search_employees(
        self,
        query: Optional[str] = None,
        section_id: Optional[int] = None,
        status: Optional[str] = None,
        max_results: int = 50
    ) -> List[Employee]:
        """
        Search employees with filters

        Args:
            query: Matches name, email or employment number
            section_id: Filter by section
            status: Filter by employment status
            max_results: Maximum results to return

        Returns:
            List of Employee objects
        """
        q = Employee.query.filter_by(is_active=True)

        query = clean_search_query(query)
        if query:
            pattern = f'%{sanitize_sql_like_pattern(query)}%'
            q = q.filter(or_(
                Employee.first_name.ilike(pattern, escape='\\'),
                Employee.last_name.ilike(pattern, escape='\\'),
                Employee.email.ilike(pattern, escape='\\'),
                Employee.employment_number.ilike(pattern, escape='\\'),
            ))

        if section_id:
            q = q.filter_by(section_id=section_id)

        if status:
            q = q.filter_by(status=status)

        return q.order_by(Employee.last_name, Employee.first_name).limit(max_results).all()

    def terminate_employee(self, employee_id: int, data: dict, terminated_by: Optional[User] = None) -> Employee:
        employee = self.get_employee_by_id(employee_id)
        if employee.status == 'terminated':
            raise ServiceError('Employee is already terminated')
        if data['termination_date'] < employee.hire_date:
            raise ServiceError('Termination date cannot be before hire date')

        employee.status = 'terminated'
        employee.termination_date = data['termination_date']
        employee.termination_reason = data['termination_reason']
        employee.severance = data.get('severance')
        employee.exit_interview = data.get('exit_interview')

        AuditLog.log_event(
            'employee_terminated',
            user_id=terminated_by.id if terminated_by else None,
            resource_type='employee',
            resource_id=employee.id,
            details={'termination_date': employee.termination_date, 'reason': employee.termination_reason}
        )
        db.session.commit()
        current_app.logger.info(f'Employee {employee.employment_number} terminated')
        return employee

    # ===== EMPLOYEE DETAILS =====

    def create_employee_details(self, employee_id: int, data: dict) -> EmployeeDetails:
        employee = self.get_employee_by_id(employee_id)
        if employee.details:
            raise ConflictError('Details already exist for this employee')

        details = EmployeeDetails(employee_id=employee.id)
        for section in DETAIL_SECTIONS:
            if data.get(section) is not None:
                setattr(details, section, data[section])

        db.session.add(details)
        db.session.commit()
        return details

    def get_employee_details_by_id(self, employee_id: int) -> EmployeeDetails:
        details = EmployeeDetails.query.filter_by(employee_id=employee_id).first()
        if not details:
            raise NotFoundError('Employee details not found')
        return details

    def update_employee_details(self, employee_id: int, data: dict) -> EmployeeDetails:
        """Merge every section present in the payload into the stored details"""
        details = self.get_employee_details_by_id(employee_id)
        for section in DETAIL_SECTIONS:
            if data.get(section) is not None:
                self._merge_section(details, section, data[section])
        db.session.commit()
        return details

    def _merge_section(self, details: EmployeeDetails, section: str, values: dict):
        merged = dict(getattr(details, section) or {})
        merged.update({k: v for k, v in values.items() if v is not None})
        # Assign a new dict so the JSON column is flagged dirty
        setattr(details, section, merged)

    def update_detail_section(self, employee_id: int, section: str, values: dict) -> EmployeeDetails:
        if section not in DETAIL_SECTIONS:
            raise ServiceError(f'Unknown details section: {section}')
        details = self.get_employee_details_by_id(employee_id)
        self._merge_section(details, section, values)
        db.session.commit()
        return details

    def update_address(self, employee_id: int, values: dict) -> EmployeeDetails:
        return self.update_detail_section(employee_id, 'address', values)

    def update_emergency_contact(self, employee_id: int, values: dict) -> EmployeeDetails:
        return self.update_detail_section(employee_id, 'emergency_contact', values)

    def update_banking_info(self, employee_id: int, values: dict) -> EmployeeDetails:
        return self.update_detail_section(employee_id, 'banking_info', values)

    def update_additional_info(self, employee_id: int, values: dict) -> EmployeeDetails:
        return self.update_detail_section(employee_id, 'additional_info', values)

    def delete_employee_details(self, employee_id: int) -> None:
        details = self.get_employee_details_by_id(employee_id)
        db.session.delete(details)
        db.session.commit()

    def get_all_employee_details(self) -> List[EmployeeDetails]:
        return EmployeeDetails.query.join(Employee).filter(Employee.is_active.is_(True)) \
            .order_by(EmployeeDetails.updated_at.desc()).all()

    # ===== PROFILE =====

    def get_complete_employee_profile(self, employee_id: int, activity_limit: int = 10) -> Dict:
        """
        Employee record with details, active documents, recent activities
        and a leave summary for the current year
        """
        employee = self.get_employee_by_id(employee_id)
        year = date.today().year

        documents = EmployeeDocument.query.filter_by(employee_id=employee.id, is_active=True) \
            .order_by(EmployeeDocument.uploaded_at.desc()).all()
        activities = EmployeeActivity.query.filter_by(employee_id=employee.id, is_active=True) \
            .order_by(EmployeeActivity.date.desc()).limit(activity_limit).all()
        balances = LeaveBalance.query.filter_by(employee_id=employee.id, year=year).all()

        requests = employee.leave_requests.all()
        leave_summary = {
            'year': year,
            'pending': sum(1 for r in requests if r.status == 'pending'),
            'approved': sum(1 for r in requests if r.status == 'approved'),
            'rejected': sum(1 for r in requests if r.status == 'rejected'),
            'days_taken': sum(r.days for r in requests
                              if r.status == 'approved' and r.start_date.year == year),
            'balances': [b.to_dict() for b in balances],
        }

        return {
            'employee': employee.to_dict(),
            'details': employee.details.to_dict() if employee.details else None,
            'documents': [d.to_dict() for d in documents],
            'recent_activities': [a.to_dict() for a in activities],
            'leave_summary': leave_summary,
            'is_on_leave': employee.is_on_leave(),
        }


# Singleton instance
employee_service = EmployeeService()
