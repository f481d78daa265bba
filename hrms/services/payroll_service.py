"""
Payroll Service
Pay records, benefit plans and enrollments
"""
from decimal import Decimal
from typing import List
from flask import current_app
from hrms import db
from hrms.models.employee import Employee
from hrms.models.payroll import Payroll
from hrms.models.benefit import Benefit, EmployeeBenefit
from hrms.services.errors import ConflictError, NotFoundError, ServiceError


class PayrollService:

    def _get_employee(self, employee_id: int) -> Employee:
        employee = db.session.get(Employee, employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError('Employee not found')
        return employee

    # ===== PAYROLL =====

    def create_payroll(self, data: dict) -> Payroll:
        self._get_employee(data['employee_id'])
        if (data.get('deductions') or 0) > data['salary'] + (data.get('bonus') or 0):
            raise ServiceError('Deductions cannot exceed gross pay')

        payroll = Payroll(
            employee_id=data['employee_id'],
            salary=data['salary'],
            bonus=data.get('bonus') or 0,
            deductions=data.get('deductions') or 0,
            pay_date=data['pay_date'],
            payment_method=data.get('payment_method') or 'bank',
        )
        db.session.add(payroll)
        db.session.commit()
        current_app.logger.info(f'Payroll {payroll.id} recorded for employee {payroll.employee_id}')
        return payroll

    def get_payroll_by_id(self, payroll_id: int) -> Payroll:
        payroll = db.session.get(Payroll, payroll_id)
        if not payroll:
            raise NotFoundError('Payroll record not found')
        return payroll

    def get_all_payrolls(self) -> List[Payroll]:
        return Payroll.query.order_by(Payroll.pay_date.desc(), Payroll.id.desc()).all()

    def get_payrolls_by_employee(self, employee_id: int) -> List[Payroll]:
        return Payroll.query.filter_by(employee_id=employee_id) \
            .order_by(Payroll.pay_date.desc(), Payroll.id.desc()).all()

    def update_payroll(self, payroll_id: int, data: dict) -> Payroll:
        payroll = self.get_payroll_by_id(payroll_id)
        values = {field: data[field] for field in ('salary', 'bonus', 'deductions', 'pay_date', 'payment_method')
                  if data.get(field) is not None}

        salary = values.get('salary', payroll.salary) or 0
        bonus = values.get('bonus', payroll.bonus) or 0
        deductions = values.get('deductions', payroll.deductions) or 0
        if Decimal(str(deductions)) > Decimal(str(salary)) + Decimal(str(bonus)):
            raise ServiceError('Deductions cannot exceed gross pay')

        for field, value in values.items():
            setattr(payroll, field, value)
        db.session.commit()
        return payroll

    def delete_payroll(self, payroll_id: int) -> None:
        payroll = self.get_payroll_by_id(payroll_id)
        db.session.delete(payroll)
        db.session.commit()

    # ===== BENEFITS =====

    def create_benefit(self, data: dict) -> Benefit:
        benefit = Benefit(**data)
        db.session.add(benefit)
        db.session.commit()
        return benefit

    def get_benefit_by_id(self, benefit_id: int) -> Benefit:
        benefit = db.session.get(Benefit, benefit_id)
        if not benefit:
            raise NotFoundError('Benefit not found')
        return benefit

    def get_all_benefits(self, include_inactive: bool = False) -> List[Benefit]:
        query = Benefit.query
        if not include_inactive:
            query = query.filter_by(is_active=True)
        return query.order_by(Benefit.name).all()

    def update_benefit(self, benefit_id: int, data: dict) -> Benefit:
        benefit = self.get_benefit_by_id(benefit_id)
        for field, value in data.items():
            if value is not None:
                setattr(benefit, field, value)
        db.session.commit()
        return benefit

    def delete_benefit(self, benefit_id: int) -> None:
        benefit = self.get_benefit_by_id(benefit_id)
        db.session.delete(benefit)
        db.session.commit()

    def enroll_employee_in_benefit(self, employee_id: int, benefit_id: int) -> EmployeeBenefit:
        self._get_employee(employee_id)
        benefit = self.get_benefit_by_id(benefit_id)
        if not benefit.is_active:
            raise ServiceError('Benefit is not active')

        if EmployeeBenefit.query.filter_by(employee_id=employee_id, benefit_id=benefit_id).first():
            raise ConflictError('Employee is already enrolled in this benefit')

        enrollment = EmployeeBenefit(employee_id=employee_id, benefit_id=benefit_id)
        db.session.add(enrollment)
        db.session.commit()
        return enrollment

    def get_employee_benefits(self, employee_id: int) -> List[EmployeeBenefit]:
        self._get_employee(employee_id)
        return EmployeeBenefit.query.filter_by(employee_id=employee_id) \
            .order_by(EmployeeBenefit.enrolled_on.desc()).all()


# Singleton instance
payroll_service = PayrollService()
