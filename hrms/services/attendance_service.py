"""
Attendance Service
Clock-in/out, manual time entries and attendance reports
"""
import calendar
from datetime import datetime, date
from typing import List, Optional, Dict
from flask import current_app
from sqlalchemy import extract
from hrms import db
from hrms.models.employee import Employee
from hrms.models.time_entry import TimeEntry
from hrms.models.leave_request import LeaveRequest
from hrms.services.errors import ConflictError, InvalidStateError, NotFoundError, ServiceError
from hrms.utils.timezone_utils import org_today, is_late_arrival, convert_org_tz_to_utc, format_datetime_for_org


WORKED_STATUSES = ('present', 'late', 'half-day')


class AttendanceService:
    """Service for attendance tracking"""

    def _policy(self):
        config = current_app.config
        return {
            'tz': config.get('ORG_TIMEZONE', 'UTC'),
            'workday_start': config.get('WORKDAY_START', '08:00'),
            'grace': config.get('LATE_GRACE_MINUTES', 15),
            'standard_hours': config.get('STANDARD_WORK_HOURS', 8.0),
            'half_day_hours': config.get('HALF_DAY_HOURS', 4.0),
        }

    def _compute(self, entry: TimeEntry):
        policy = self._policy()
        entry.compute_hours(policy['standard_hours'], policy['half_day_hours'])

    def _to_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        """Manual entries give wall-clock times; naive values are org-local"""
        return convert_org_tz_to_utc(value, self._policy()['tz'])

    # ===== CLOCK IN / OUT =====

    def clock_in(self, employee: Employee, now: Optional[datetime] = None) -> TimeEntry:
        """
        Record arrival for today

        Args:
            employee: The employee clocking in
            now: Current UTC time (naive); defaults to utcnow

        Returns:
            The new TimeEntry with status 'present' or 'late'

        Raises:
            ConflictError: If the employee already has an entry for today
        """
        now = now or datetime.utcnow()
        policy = self._policy()
        today = org_today(policy['tz'], now)

        existing = TimeEntry.query.filter_by(employee_id=employee.id, date=today).first()
        if existing:
            raise ConflictError('You have already clocked in today')

        late = is_late_arrival(now, policy['tz'], policy['workday_start'], policy['grace'])
        entry = TimeEntry(
            employee_id=employee.id,
            date=today,
            check_in=now,
            status='late' if late else 'present',
        )
        db.session.add(entry)
        db.session.commit()

        current_app.logger.info(
            f"Employee {employee.id} clocked in at {format_datetime_for_org(now, policy['tz'])} ({entry.status})"
        )
        return entry

    def clock_out(self, employee: Employee, now: Optional[datetime] = None) -> TimeEntry:
        """
        Close today's entry and compute hours and overtime

        Raises:
            InvalidStateError: If there is no clock-in for today
            ConflictError: If the employee already clocked out
        """
        now = now or datetime.utcnow()
        policy = self._policy()
        today = org_today(policy['tz'], now)

        entry = TimeEntry.query.filter_by(employee_id=employee.id, date=today).first()
        if not entry or not entry.check_in:
            raise InvalidStateError('You have not clocked in today')
        if entry.check_out:
            raise ConflictError('You have already clocked out today')

        entry.check_out = now
        self._compute(entry)
        db.session.commit()

        current_app.logger.info(f'Employee {employee.id} clocked out after {entry.hours_worked}h')
        return entry

    def get_today_entry(self, employee: Employee) -> Optional[TimeEntry]:
        today = org_today(self._policy()['tz'])
        return TimeEntry.query.filter_by(employee_id=employee.id, date=today).first()

    # ===== TIME ENTRY CRUD =====

    def create_time_entry(self, data: dict) -> TimeEntry:
        employee = db.session.get(Employee, data['employee_id'])
        if not employee or not employee.is_active:
            raise NotFoundError('Employee not found')

        if TimeEntry.query.filter_by(employee_id=employee.id, date=data['date']).first():
            raise ConflictError('A time entry already exists for this employee on this date')

        entry = TimeEntry(
            employee_id=employee.id,
            date=data['date'],
            status=data.get('status') or 'present',
            check_in=self._to_utc(data.get('check_in')),
            check_out=self._to_utc(data.get('check_out')),
            reason=data.get('reason'),
        )
        self._compute(entry)
        db.session.add(entry)
        db.session.commit()
        return entry

    def get_time_entry_by_id(self, entry_id: int) -> TimeEntry:
        entry = db.session.get(TimeEntry, entry_id)
        if not entry:
            raise NotFoundError('Time entry not found')
        return entry

    def get_employee_time_entries(self, employee_id: int, on_date: Optional[date] = None) -> List[TimeEntry]:
        query = TimeEntry.query.filter_by(employee_id=employee_id)
        if on_date:
            query = query.filter_by(date=on_date)
        return query.order_by(TimeEntry.date.desc()).all()

    def update_time_entry(self, entry_id: int, data: dict) -> TimeEntry:
        entry = self.get_time_entry_by_id(entry_id)
        check_in = self._to_utc(data['check_in']) if data.get('check_in') is not None else entry.check_in
        check_out = self._to_utc(data['check_out']) if data.get('check_out') is not None else entry.check_out
        if check_in and check_out and check_out < check_in:
            raise ServiceError('Check-out cannot be before check-in')

        for field in ('status', 'reason'):
            if data.get(field) is not None:
                setattr(entry, field, data[field])
        entry.check_in = check_in
        entry.check_out = check_out

        self._compute(entry)
        db.session.commit()
        return entry

    def delete_time_entry(self, entry_id: int) -> None:
        entry = self.get_time_entry_by_id(entry_id)
        db.session.delete(entry)
        db.session.commit()

    # ===== REPORTS =====

    def _approved_leaves_between(self, start: date, end: date, employee_ids=None):
        query = LeaveRequest.query.filter(
            LeaveRequest.status == 'approved',
            LeaveRequest.start_date <= end,
            LeaveRequest.end_date >= start,
        )
        if employee_ids is not None:
            query = query.filter(LeaveRequest.employee_id.in_(employee_ids))
        return query.all()

    def get_daily_attendance_report(self, report_date: date) -> List[Dict]:
        """
        One row per active employee: 'On Leave', 'Present' or 'Absent'

        Approved leave covering the date wins over a time entry.
        """
        employees = Employee.query.filter_by(is_active=True) \
            .order_by(Employee.last_name, Employee.first_name).all()

        entries = {e.employee_id: e for e in TimeEntry.query.filter_by(date=report_date).all()}
        on_leave = {lr.employee_id for lr in self._approved_leaves_between(report_date, report_date)}

        rows = []
        for employee in employees:
            entry = entries.get(employee.id)
            if employee.id in on_leave:
                status = 'On Leave'
            elif entry and entry.status != 'absent':
                status = 'Present'
            else:
                status = 'Absent'

            rows.append({
                'employee_id': employee.id,
                'employee_name': employee.full_name,
                'employment_number': employee.employment_number,
                'section_name': employee.section_name,
                'status': status,
                'attendance_status': entry.status if entry else None,
                'check_in': entry.check_in.isoformat() if entry and entry.check_in else None,
                'check_out': entry.check_out.isoformat() if entry and entry.check_out else None,
                'hours_worked': entry.hours_worked if entry else None,
            })
        return rows

    def get_monthly_attendance_summary(self, year: int, month: int, section_id: Optional[int] = None) -> List[Dict]:
        """
        Per-employee totals for one month

        Returns:
            List of dicts with days_worked, late_days, absent_days, total_hours,
            total_overtime, leave_requests and leave_days (days inside the month)
        """
        if not 1 <= month <= 12:
            raise ServiceError('Month must be between 1 and 12')

        first_day = date(year, month, 1)
        last_day = date(year, month, calendar.monthrange(year, month)[1])

        query = Employee.query.filter_by(is_active=True)
        if section_id:
            query = query.filter_by(section_id=section_id)
        employees = query.order_by(Employee.last_name, Employee.first_name).all()
        employee_ids = [e.id for e in employees]

        entries = TimeEntry.query.filter(
            TimeEntry.employee_id.in_(employee_ids),
            TimeEntry.date >= first_day,
            TimeEntry.date <= last_day,
        ).all() if employee_ids else []
        leaves = self._approved_leaves_between(first_day, last_day, employee_ids) if employee_ids else []

        summary = {
            e.id: {
                'employee_id': e.id,
                'employee_name': e.full_name,
                'section_name': e.section_name,
                'days_worked': 0,
                'late_days': 0,
                'absent_days': 0,
                'total_hours': 0.0,
                'total_overtime': 0.0,
                'leave_requests': 0,
                'leave_days': 0,
            }
            for e in employees
        }

        for entry in entries:
            row = summary[entry.employee_id]
            if entry.status in WORKED_STATUSES:
                row['days_worked'] += 1
            if entry.status == 'late':
                row['late_days'] += 1
            if entry.status == 'absent':
                row['absent_days'] += 1
            row['total_hours'] = round(row['total_hours'] + (entry.hours_worked or 0), 2)
            row['total_overtime'] = round(row['total_overtime'] + (entry.overtime or 0), 2)

        for leave in leaves:
            row = summary[leave.employee_id]
            row['leave_requests'] += 1
            overlap_start = max(leave.start_date, first_day)
            overlap_end = min(leave.end_date, last_day)
            row['leave_days'] += (overlap_end - overlap_start).days + 1

        return list(summary.values())

    def get_absenteeism_trends(self, year: int) -> List[Dict]:
        """Approved leave requests and absent entries per month of the year"""
        trends = [
            {'month': m, 'month_name': calendar.month_abbr[m], 'leave_count': 0, 'absent_count': 0}
            for m in range(1, 13)
        ]

        leaves = LeaveRequest.query.filter(
            LeaveRequest.status == 'approved',
            extract('year', LeaveRequest.start_date) == year,
        ).all()
        for leave in leaves:
            trends[leave.start_date.month - 1]['leave_count'] += 1

        absences = TimeEntry.query.filter(
            TimeEntry.status == 'absent',
            extract('year', TimeEntry.date) == year,
        ).all()
        for entry in absences:
            trends[entry.date.month - 1]['absent_count'] += 1

        return trends

    def get_time_tracking_summary(self, start_date: date, end_date: date) -> List[Dict]:
        """Per-date counts of each attendance status, oldest date first"""
        if end_date < start_date:
            raise ServiceError('End date cannot be before start date')

        entries = TimeEntry.query.filter(
            TimeEntry.date >= start_date,
            TimeEntry.date <= end_date,
        ).order_by(TimeEntry.date).all()

        by_date = {}
        for entry in entries:
            row = by_date.setdefault(entry.date, {
                'date': entry.date.isoformat(),
                'present': 0, 'absent': 0, 'late': 0, 'half_day': 0,
                'employee_ids': [],
            })
            row[entry.status.replace('-', '_')] += 1
            row['employee_ids'].append(entry.employee_id)

        return [by_date[d] for d in sorted(by_date)]


# Singleton instance
attendance_service = AttendanceService()
