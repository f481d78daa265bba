"""
Leave Balance Model
Allocated and used leave days per employee, leave type and year
"""
from datetime import datetime
from hrms import db


class LeaveBalance(db.Model):
    __tablename__ = 'leave_balances'
    __table_args__ = (
        db.UniqueConstraint('employee_id', 'leave_type', 'year', name='uq_leave_balance_employee_type_year'),
    )

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)
    leave_type = db.Column(db.String(20), nullable=False)
    year = db.Column(db.Integer, nullable=False, index=True)

    allocated = db.Column(db.Float, nullable=False, default=0)
    used = db.Column(db.Float, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('leave_balances', lazy='dynamic',
                                                              cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<LeaveBalance {self.employee_id} {self.leave_type} {self.year}>'

    @property
    def remaining(self):
        return max(self.allocated - self.used, 0)

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'leave_type': self.leave_type,
            'year': self.year,
            'allocated': self.allocated,
            'used': self.used,
            'remaining': self.remaining,
        }
