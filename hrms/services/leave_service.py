"""
Leave Service
Leave requests, the approval workflow, balances and leave reports
"""
from datetime import datetime, date
from typing import List, Optional, Dict
from dateutil.relativedelta import relativedelta
from flask import current_app
from sqlalchemy import extract, func
from hrms import db
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.models.leave_balance import LeaveBalance
from hrms.models.audit_log import AuditLog
from hrms.services.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDenied, ServiceError
from hrms.services.activity_service import activity_service
from hrms.services.email_service import email_service


BALANCE_LEAVE_TYPES = ('annual', 'sick', 'personal')
OPEN_STATUSES = ('pending', 'approved')
UTILIZATION_TIMEFRAMES = ('month', 'quarter', 'year')


class LeaveService:
    """Service for leave management"""

    def get_policy_allocation(self, leave_type: str) -> float:
        """Days granted per year for a leave type; unpaid leave has no allocation"""
        config_keys = {
            'annual': 'ANNUAL_LEAVE_DAYS',
            'sick': 'SICK_LEAVE_DAYS',
            'personal': 'PERSONAL_LEAVE_DAYS',
        }
        key = config_keys.get(leave_type)
        return float(current_app.config.get(key, 0)) if key else 0.0

    def _get_employee(self, employee_id: int) -> Employee:
        employee = db.session.get(Employee, employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError('Employee not found')
        return employee

    # ===== BALANCES =====

    def get_remaining_leave_days(self, employee_id: int, leave_type: str = 'annual',
                                 year: Optional[int] = None) -> Optional[float]:
        """
        Remaining days for the employee in the given year

        Without a stored balance the policy allocation minus approved days
        taken that year is used. Returns None for unpaid leave (unlimited).
        """
        if leave_type not in BALANCE_LEAVE_TYPES:
            return None

        year = year or date.today().year
        balance = LeaveBalance.query.filter_by(employee_id=employee_id, leave_type=leave_type, year=year).first()
        if balance:
            return balance.remaining

        taken = db.session.query(func.coalesce(func.sum(LeaveRequest.days), 0)).filter(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.leave_type == leave_type,
            LeaveRequest.status == 'approved',
            extract('year', LeaveRequest.start_date) == year,
        ).scalar()
        return max(self.get_policy_allocation(leave_type) - float(taken or 0), 0.0)

    def create_leave_balance(self, data: dict) -> LeaveBalance:
        self._get_employee(data['employee_id'])

        existing = LeaveBalance.query.filter_by(
            employee_id=data['employee_id'], leave_type=data['leave_type'], year=data['year']
        ).first()
        if existing:
            raise ConflictError('A leave balance already exists for this employee, type and year')

        balance = LeaveBalance(
            employee_id=data['employee_id'],
            leave_type=data['leave_type'],
            year=data['year'],
            allocated=data['allocated'],
            used=0,
        )
        db.session.add(balance)
        db.session.commit()
        return balance

    def get_employee_leave_balance(self, employee_id: int, year: Optional[int] = None) -> List[Dict]:
        """One entry per balance leave type; missing balances are reported from policy"""
        self._get_employee(employee_id)
        year = year or date.today().year

        stored = {
            b.leave_type: b
            for b in LeaveBalance.query.filter_by(employee_id=employee_id, year=year).all()
        }

        result = []
        for leave_type in BALANCE_LEAVE_TYPES:
            if leave_type in stored:
                result.append(stored[leave_type].to_dict())
            else:
                allocated = self.get_policy_allocation(leave_type)
                remaining = self.get_remaining_leave_days(employee_id, leave_type, year)
                result.append({
                    'id': None,
                    'employee_id': employee_id,
                    'leave_type': leave_type,
                    'year': year,
                    'allocated': allocated,
                    'used': allocated - remaining,
                    'remaining': remaining,
                })
        return result

    def _get_or_create_balance(self, employee_id: int, leave_type: str, year: int) -> LeaveBalance:
        balance = LeaveBalance.query.filter_by(employee_id=employee_id, leave_type=leave_type, year=year).first()
        if not balance:
            balance = LeaveBalance(
                employee_id=employee_id,
                leave_type=leave_type,
                year=year,
                allocated=self.get_policy_allocation(leave_type),
                used=0,
            )
            db.session.add(balance)
        return balance

    def reset_leave_balances(self, year: int) -> int:
        """Set used days back to zero for every balance of the year"""
        count = LeaveBalance.query.filter_by(year=year).update({'used': 0}, synchronize_session='fetch')
        db.session.commit()
        current_app.logger.info(f'Reset {count} leave balances for {year}')
        return count

    # ===== VALIDATION =====

    def _find_overlap(self, employee_id: int, start_date: date, end_date: date,
                      exclude_id: Optional[int] = None) -> Optional[LeaveRequest]:
        query = LeaveRequest.query.filter(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status.in_(OPEN_STATUSES),
            LeaveRequest.start_date <= end_date,
            LeaveRequest.end_date >= start_date,
        )
        if exclude_id:
            query = query.filter(LeaveRequest.id != exclude_id)
        return query.first()

    def validate_leave_request(self, employee_id: int, start_date: date, end_date: date,
                               leave_type: str = 'annual') -> Dict:
        """
        Check dates, overlaps and balance without creating anything

        Returns:
            {valid, message, requested_days, available_days}
        """
        requested_days = LeaveRequest.calculate_days(start_date, end_date)
        available_days = self.get_remaining_leave_days(employee_id, leave_type, start_date.year)

        def result(valid, message=None):
            return {
                'valid': valid,
                'message': message,
                'requested_days': requested_days,
                'available_days': available_days,
            }

        if end_date < start_date:
            return result(False, 'End date cannot be before start date')

        overlap = self._find_overlap(employee_id, start_date, end_date)
        if overlap:
            return result(False, f'Overlaps with an existing {overlap.status} request '
                                 f'({overlap.start_date.isoformat()} to {overlap.end_date.isoformat()})')

        if available_days is not None and requested_days > available_days:
            return result(False, f'Insufficient {leave_type} leave balance: requested {requested_days} '
                                 f'days, {available_days:g} available')

        return result(True)

    # ===== REQUESTS =====

    def _charge_annual_balance(self, employee_id: int, leave_type: str, days: float, year: int):
        """
        Apply the annual balance to a pending request

        An annual request larger than the remaining balance is recorded as
        unpaid. Pending requests are not charged yet, so the remaining days
        never include the request being checked. Returns the leave type to
        store and a fresh part B (office use) section.
        """
        annual_allocation = self.get_policy_allocation('annual')
        annual_remaining = self.get_remaining_leave_days(employee_id, 'annual', year)
        balance = LeaveBalance.query.filter_by(employee_id=employee_id, leave_type='annual', year=year).first()
        if balance:
            annual_allocation = balance.allocated

        if leave_type == 'annual' and days > annual_remaining:
            current_app.logger.info(
                f'Leave request for employee {employee_id} exceeds annual balance '
                f'({days} > {annual_remaining}); recording as unpaid'
            )
            leave_type = 'unpaid'

        deducted = days if leave_type == 'annual' else 0
        part_b = {
            'annual_leave_days': annual_allocation,
            'deducted_days': deducted,
            'remaining_days': annual_remaining - deducted,
            'date_of_approval': None,
            'hr_signature': None,
        }
        return leave_type, part_b

    def create_leave_request(self, employee_id: int, data: dict) -> LeaveRequest:
        """
        Create a pending leave request

        Args:
            employee_id: Requesting employee
            data: Validated LeaveRequestSchema payload

        Returns:
            The new LeaveRequest; an annual request larger than the remaining
            balance is stored as unpaid

        Raises:
            ConflictError: If it overlaps a pending or approved request
        """
        employee = self._get_employee(employee_id)
        start_date, end_date = data['start_date'], data['end_date']
        if end_date < start_date:
            raise ServiceError('End date cannot be before start date')

        overlap = self._find_overlap(employee.id, start_date, end_date)
        if overlap:
            raise ConflictError('Leave request overlaps an existing pending or approved request')

        days = LeaveRequest.calculate_days(start_date, end_date)
        leave_type, part_b = self._charge_annual_balance(
            employee.id, data.get('leave_type') or 'annual', days, start_date.year
        )

        part_a = {
            'employee_name': employee.full_name,
            'employment_number': employee.employment_number,
            'position': employee.position_title,
            'email': employee.email,
            'phone': employee.phone,
            'address': employee.physical_address,
        }
        part_a.update({k: v for k, v in (data.get('part_a') or {}).items() if v is not None})
        part_a.update({
            'number_of_days': days,
            'start_date': start_date.isoformat(),
            'end_date': end_date.isoformat(),
            'date_of_request': part_a.get('date_of_request') or date.today().isoformat(),
        })
        part_a = {k: (v.isoformat() if isinstance(v, date) else v) for k, v in part_a.items()}

        part_c = data.get('part_c')
        if part_c:
            part_c = {k: (v.isoformat() if isinstance(v, date) else v) for k, v in part_c.items()}

        leave_request = LeaveRequest(
            employee_id=employee.id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=data.get('reason'),
            status='pending',
            part_a=part_a,
            part_b=part_b,
            part_c=part_c,
        )
        db.session.add(leave_request)

        activity_service.add_employee_activity(
            employee.id, 'leave',
            f'Requested {days} day(s) of {leave_type} leave from {start_date.isoformat()} to {end_date.isoformat()}',
            commit=False
        )
        db.session.commit()

        current_app.logger.info(f'Leave request {leave_request.id} created for employee {employee.id}')
        return leave_request

    def get_leave_request_by_id(self, request_id: int) -> LeaveRequest:
        leave_request = db.session.get(LeaveRequest, request_id)
        if not leave_request:
            raise NotFoundError('Leave request not found')
        return leave_request

    def update_leave_request(self, request_id: int, data: dict) -> LeaveRequest:
        """Edit a request while it is still pending; days are recomputed"""
        leave_request = self.get_leave_request_by_id(request_id)
        if not leave_request.is_pending:
            raise InvalidStateError(f'Request is already {leave_request.status}')

        start_date = data.get('start_date') or leave_request.start_date
        end_date = data.get('end_date') or leave_request.end_date
        if end_date < start_date:
            raise ServiceError('End date cannot be before start date')

        if self._find_overlap(leave_request.employee_id, start_date, end_date, exclude_id=leave_request.id):
            raise ConflictError('Leave request overlaps an existing pending or approved request')

        days = LeaveRequest.calculate_days(start_date, end_date)
        leave_type, part_b = self._charge_annual_balance(
            leave_request.employee_id, data.get('leave_type') or leave_request.leave_type, days, start_date.year
        )
        part_b.update({k: v for k, v in (leave_request.part_b or {}).items()
                       if k in ('date_of_approval', 'hr_signature')})

        leave_request.start_date = start_date
        leave_request.end_date = end_date
        leave_request.days = days
        leave_request.leave_type = leave_type
        leave_request.part_b = part_b
        if data.get('reason') is not None:
            leave_request.reason = data['reason']
        if data.get('part_a'):
            part_a = dict(leave_request.part_a or {})
            part_a.update({k: (v.isoformat() if isinstance(v, date) else v)
                           for k, v in data['part_a'].items() if v is not None})
            leave_request.part_a = part_a
        if data.get('part_c'):
            leave_request.part_c = {k: (v.isoformat() if isinstance(v, date) else v)
                                    for k, v in data['part_c'].items()}

        # Keep the form's own copy of the dates in step with the request
        part_a = dict(leave_request.part_a or {})
        part_a.update({
            'number_of_days': leave_request.days,
            'start_date': start_date.isoformat(),
            'end_date': end_date.isoformat(),
        })
        leave_request.part_a = part_a

        db.session.commit()
        return leave_request

    def approve_leave_request(self, request_id: int, approver_name: str, comments: Optional[str] = None,
                              approver_id: Optional[int] = None) -> LeaveRequest:
        """
        Approve a pending request and charge its days to the leave balance

        Raises:
            InvalidStateError: If the request is not pending
        """
        leave_request = self.get_leave_request_by_id(request_id)
        if not leave_request.is_pending:
            raise InvalidStateError(f'Request is already {leave_request.status}')

        leave_request.approve(approver_name, comments)

        remaining = None
        if leave_request.leave_type in BALANCE_LEAVE_TYPES:
            balance = self._get_or_create_balance(
                leave_request.employee_id, leave_request.leave_type, leave_request.start_date.year
            )
            balance.used = (balance.used or 0) + leave_request.days
            remaining = balance.remaining

        part_b = dict(leave_request.part_b or {})
        part_b['date_of_approval'] = date.today().isoformat()
        part_b['hr_signature'] = approver_name
        if leave_request.leave_type == 'annual' and remaining is not None:
            part_b['remaining_days'] = remaining
        leave_request.part_b = part_b

        activity_service.add_employee_activity(
            leave_request.employee_id, 'leave',
            f'{leave_request.leave_type.capitalize()} leave from {leave_request.start_date.isoformat()} '
            f'to {leave_request.end_date.isoformat()} approved by {approver_name}',
            commit=False
        )
        AuditLog.log_event('leave_approved', user_id=approver_id, resource_type='leave_request',
                           resource_id=leave_request.id, details={'days': leave_request.days})
        db.session.commit()

        email_service.send_leave_decision_email(leave_request)
        current_app.logger.info(f'Leave request {leave_request.id} approved by {approver_name}')
        return leave_request

    def reject_leave_request(self, request_id: int, rejected_by: str, reason: Optional[str] = None,
                             rejected_by_id: Optional[int] = None) -> LeaveRequest:
        leave_request = self.get_leave_request_by_id(request_id)
        if not leave_request.is_pending:
            raise InvalidStateError(f'Request is already {leave_request.status}')

        leave_request.reject(rejected_by, reason)

        activity_service.add_employee_activity(
            leave_request.employee_id, 'leave',
            f'{leave_request.leave_type.capitalize()} leave from {leave_request.start_date.isoformat()} '
            f'to {leave_request.end_date.isoformat()} rejected by {rejected_by}',
            commit=False
        )
        AuditLog.log_event('leave_rejected', user_id=rejected_by_id, resource_type='leave_request',
                           resource_id=leave_request.id, details={'reason': reason})
        db.session.commit()

        email_service.send_leave_decision_email(leave_request)
        current_app.logger.info(f'Leave request {leave_request.id} rejected by {rejected_by}')
        return leave_request

    def cancel_leave_request(self, request_id: int, employee: Employee) -> LeaveRequest:
        """Employee withdraws their own pending request"""
        leave_request = self.get_leave_request_by_id(request_id)
        if leave_request.employee_id != employee.id:
            raise PermissionDenied('You can only cancel your own leave requests')
        if not leave_request.is_pending:
            raise InvalidStateError(f'Request is already {leave_request.status}')

        leave_request.reject(employee.full_name, 'Cancelled by employee')
        activity_service.add_employee_activity(
            employee.id, 'leave',
            f'Cancelled leave request for {leave_request.start_date.isoformat()} to {leave_request.end_date.isoformat()}',
            commit=False
        )
        db.session.commit()
        return leave_request

    def get_employee_leave_requests(self, employee_id: int, status: Optional[str] = None) -> List[LeaveRequest]:
        query = LeaveRequest.query.filter_by(employee_id=employee_id)
        if status:
            query = query.filter_by(status=status)
        return query.order_by(LeaveRequest.applied_date.desc()).all()

    def get_pending_leave_requests(self) -> List[LeaveRequest]:
        """Oldest first, so reviewers work the queue in order"""
        return LeaveRequest.query.join(Employee).filter(
            LeaveRequest.status == 'pending',
            Employee.is_active.is_(True),
        ).order_by(LeaveRequest.applied_date.asc(), LeaveRequest.id.asc()).all()

    def get_all_leave_requests(self, status: Optional[str] = None, section_id: Optional[int] = None) -> List[LeaveRequest]:
        query = LeaveRequest.query.join(Employee)
        if status:
            query = query.filter(LeaveRequest.status == status)
        if section_id:
            query = query.filter(Employee.section_id == section_id)
        return query.order_by(LeaveRequest.applied_date.desc(), LeaveRequest.id.desc()).all()

    # ===== REPORTS =====

    def get_leave_report(self, start_date: date, end_date: date, section_id: Optional[int] = None) -> List[Dict]:
        """
        Approved leave overlapping the range, grouped by employee and leave type

        Returns:
            List of {employee_id, employee_name, section_name, leave_type, total_days, request_count}
        """
        if end_date < start_date:
            raise ServiceError('End date cannot be before start date')

        query = db.session.query(
            LeaveRequest.employee_id,
            LeaveRequest.leave_type,
            func.sum(LeaveRequest.days).label('total_days'),
            func.count(LeaveRequest.id).label('request_count'),
        ).select_from(LeaveRequest).join(Employee, LeaveRequest.employee_id == Employee.id).filter(
            LeaveRequest.status == 'approved',
            LeaveRequest.start_date <= end_date,
            LeaveRequest.end_date >= start_date,
        )
        if section_id:
            query = query.filter(Employee.section_id == section_id)

        rows = query.group_by(LeaveRequest.employee_id, LeaveRequest.leave_type).all()

        report = []
        for row in rows:
            employee = db.session.get(Employee, row.employee_id)
            report.append({
                'employee_id': row.employee_id,
                'employee_name': employee.full_name if employee else 'Unknown',
                'section_name': employee.section_name if employee else 'Unknown',
                'leave_type': row.leave_type,
                'total_days': int(row.total_days or 0),
                'request_count': row.request_count,
            })
        report.sort(key=lambda r: (r['employee_name'], r['leave_type']))
        return report

    def get_employee_status_counts(self, on_date: Optional[date] = None) -> Dict:
        """
        Headcount split into active, suspended and on leave

        Returns:
            {active, suspended, on_leave, total}
        """
        on_date = on_date or date.today()
        base = Employee.query.filter_by(is_active=True)

        total = base.count()
        suspended = base.filter(Employee.suspended.is_(True)).count()
        on_leave = db.session.query(func.count(func.distinct(LeaveRequest.employee_id))) \
            .select_from(LeaveRequest).join(Employee, LeaveRequest.employee_id == Employee.id).filter(
            Employee.is_active.is_(True),
            LeaveRequest.status == 'approved',
            LeaveRequest.start_date <= on_date,
            LeaveRequest.end_date >= on_date,
        ).scalar() or 0

        return {
            'active': total - suspended,
            'suspended': suspended,
            'on_leave': on_leave,
            'total': total,
        }

    def get_monthly_leave_requests(self, year: int) -> List[int]:
        """Number of requests applied for in each month of the year"""
        month = extract('month', LeaveRequest.applied_date).label('month')
        rows = db.session.query(month, func.count(LeaveRequest.id)).filter(
            extract('year', LeaveRequest.applied_date) == year
        ).group_by(month).all()

        monthly = [0] * 12
        for month, count in rows:
            monthly[int(month) - 1] = count
        return monthly

    def get_employee_leave_utilization(self, timeframe: str = 'month', today: Optional[date] = None) -> Dict:
        """
        Approved leave days in the current period against total allocation

        Returns:
            {used_days, allocated_days, trend} where trend is the percentage
            change from the previous period of the same length
        """
        if timeframe not in UTILIZATION_TIMEFRAMES:
            raise ServiceError(f"Invalid timeframe. Use one of: {', '.join(UTILIZATION_TIMEFRAMES)}")

        today = today or date.today()
        if timeframe == 'month':
            period_start = today.replace(day=1)
            previous_start = period_start - relativedelta(months=1)
        elif timeframe == 'quarter':
            period_start = date(today.year, ((today.month - 1) // 3) * 3 + 1, 1)
            previous_start = period_start - relativedelta(months=3)
        else:
            period_start = date(today.year, 1, 1)
            previous_start = period_start - relativedelta(years=1)

        allocated = db.session.query(func.coalesce(func.sum(LeaveBalance.allocated), 0)).filter(
            LeaveBalance.year == today.year
        ).scalar()

        def used_between(start, end_inclusive):
            return db.session.query(func.coalesce(func.sum(LeaveRequest.days), 0)).filter(
                LeaveRequest.status == 'approved',
                LeaveRequest.start_date >= start,
                LeaveRequest.start_date <= end_inclusive,
            ).scalar() or 0

        used = used_between(period_start, today)
        previous_used = used_between(previous_start, period_start - relativedelta(days=1))
        trend = round((used - previous_used) / previous_used * 100) if previous_used > 0 else 0

        return {
            'timeframe': timeframe,
            'used_days': int(used),
            'allocated_days': float(allocated or 0),
            'trend': trend,
        }


# Singleton instance
leave_service = LeaveService()
