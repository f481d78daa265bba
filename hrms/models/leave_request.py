"""
Leave Request Model
Tracks leave requests, the four-part leave form and the approval decision
"""
from datetime import datetime
from hrms import db


LEAVE_TYPES = ('annual', 'sick', 'personal', 'unpaid')
LEAVE_STATUSES = ('pending', 'approved', 'rejected')


class LeaveRequest(db.Model):
    """Leave request model for time-off management"""
    __tablename__ = 'leave_requests'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)

    # Request details
    leave_type = db.Column(db.String(20), nullable=False, default='annual')  # annual, sick, personal, unpaid
    start_date = db.Column(db.Date, nullable=False, index=True)
    end_date = db.Column(db.Date, nullable=False, index=True)
    days = db.Column(db.Integer, nullable=False)  # Inclusive calendar days
    reason = db.Column(db.Text)
    applied_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Status and approval
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)  # pending, approved, rejected

    # Approval tracking
    approved_by = db.Column(db.String(200))
    approved_date = db.Column(db.DateTime)
    approval_comments = db.Column(db.Text)
    rejected_by = db.Column(db.String(200))
    rejected_date = db.Column(db.DateTime)
    rejection_reason = db.Column(db.Text)

    # Leave form sections (JSON)
    part_a = db.Column(db.JSON)  # Employee
    part_b = db.Column(db.JSON)  # HR
    part_c = db.Column(db.JSON)  # Supervisor
    part_d = db.Column(db.JSON)  # Final decision

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    employee = db.relationship('Employee', back_populates='leave_requests')

    def __repr__(self):
        return f'<LeaveRequest {self.id}: {self.start_date} to {self.end_date}>'

    @staticmethod
    def calculate_days(start_date, end_date):
        """
        Calculate leave days between two dates, both ends included

        Args:
            start_date: Start date
            end_date: End date

        Returns:
            Integer number of calendar days, 0 if the range is inverted
        """
        if start_date > end_date:
            return 0
        return (end_date - start_date).days + 1

    @property
    def is_pending(self):
        return self.status == 'pending'

    def approve(self, approved_by, comments=None):
        """
        Approve the leave request

        Args:
            approved_by: Name of approver
            comments: Optional approval comments
        """
        now = datetime.utcnow()
        self.status = 'approved'
        self.approved_by = approved_by
        self.approved_date = now
        self.approval_comments = comments
        self.part_d = {
            'decision': 'approved',
            'date_of_decision': now.date().isoformat(),
            'approver_signature': approved_by,
        }

    def reject(self, rejected_by, reason=None):
        """
        Reject the leave request

        Args:
            rejected_by: Name of person rejecting
            reason: Optional reason for rejection
        """
        now = datetime.utcnow()
        self.status = 'rejected'
        self.rejected_by = rejected_by
        self.rejected_date = now
        if reason:
            self.rejection_reason = reason
        self.part_d = {
            'decision': 'rejected',
            'date_of_decision': now.date().isoformat(),
            'approver_signature': rejected_by,
        }

    def to_dict(self, include_employee=False):
        data = {
            'id': self.id,
            'employee_id': self.employee_id,
            'leave_type': self.leave_type,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'days': self.days,
            'reason': self.reason,
            'status': self.status,
            'applied_date': self.applied_date.isoformat() if self.applied_date else None,
            'approved_by': self.approved_by,
            'approved_date': self.approved_date.isoformat() if self.approved_date else None,
            'approval_comments': self.approval_comments,
            'rejected_by': self.rejected_by,
            'rejected_date': self.rejected_date.isoformat() if self.rejected_date else None,
            'rejection_reason': self.rejection_reason,
            'part_a': self.part_a,
            'part_b': self.part_b,
            'part_c': self.part_c,
            'part_d': self.part_d,
        }
        if include_employee:
            data['employee_name'] = self.employee.full_name if self.employee else 'Unknown'
            data['employee_email'] = self.employee.email if self.employee else None
            data['section_name'] = self.employee.section_name if self.employee else 'Unknown'
        return data
