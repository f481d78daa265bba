# Models package
from hrms.models.user import User
from hrms.models.audit_log import AuditLog

# Organisation structure
from hrms.models.ministry import Ministry
from hrms.models.section import Section
from hrms.models.position import Position

# Employee records
from hrms.models.employee import Employee
from hrms.models.employee_details import EmployeeDetails
from hrms.models.employee_activity import EmployeeActivity
from hrms.models.employee_document import EmployeeDocument

# Time and leave
from hrms.models.time_entry import TimeEntry
from hrms.models.leave_request import LeaveRequest
from hrms.models.leave_balance import LeaveBalance

# Declarations, performance, compensation
from hrms.models.concurrency_form import ConcurrencyForm
from hrms.models.performance_review import PerformanceReview
from hrms.models.payroll import Payroll
from hrms.models.benefit import Benefit, EmployeeBenefit

# Recruitment
from hrms.models.job_posting import JobPosting
from hrms.models.candidate import Candidate
from hrms.models.interview import Interview

__all__ = [
    'User', 'AuditLog',
    'Ministry', 'Section', 'Position',
    'Employee', 'EmployeeDetails', 'EmployeeActivity', 'EmployeeDocument',
    'TimeEntry', 'LeaveRequest', 'LeaveBalance',
    'ConcurrencyForm', 'PerformanceReview', 'Payroll', 'Benefit', 'EmployeeBenefit',
    'JobPosting', 'Candidate', 'Interview',
]
