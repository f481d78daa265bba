"""
Dashboard Service
Aggregates for the HR overview and the employee's own dashboard
"""
from datetime import date
from typing import Dict
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.models.time_entry import TimeEntry
from hrms.services.leave_service import leave_service
from hrms.services.attendance_service import attendance_service
from hrms.services.concurrency_service import concurrency_service


class DashboardService:

    def get_hr_stats(self, today: date = None) -> Dict:
        today = today or date.today()

        present_today = TimeEntry.query.join(Employee, TimeEntry.employee_id == Employee.id).filter(
            TimeEntry.date == today,
            TimeEntry.status.in_(('present', 'late', 'half-day')),
            Employee.is_active.is_(True),
        ).count()

        return {
            'employee_status': leave_service.get_employee_status_counts(today),
            'pending_leave_requests': LeaveRequest.query.filter_by(status='pending').count(),
            'present_today': present_today,
            'monthly_leave_requests': leave_service.get_monthly_leave_requests(today.year),
            'concurrency': concurrency_service.get_concurrency_form_stats(),
        }

    def get_employee_dashboard(self, employee: Employee) -> Dict:
        today_entry = attendance_service.get_today_entry(employee)
        pending = leave_service.get_employee_leave_requests(employee.id, status='pending')

        return {
            'employee': employee.to_dict(),
            'today_entry': today_entry.to_dict() if today_entry else None,
            'remaining_annual_leave': leave_service.get_remaining_leave_days(employee.id, 'annual'),
            'pending_leave_requests': [r.to_dict() for r in pending],
            'is_on_leave': employee.is_on_leave(),
            'concurrency': concurrency_service.get_concurrency_form_stats(employee.id),
        }


# Singleton instance
dashboard_service = DashboardService()
