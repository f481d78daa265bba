"""
Time Entry Model
One attendance record per employee per day
"""
from datetime import datetime
from hrms import db


ATTENDANCE_STATUSES = ('present', 'absent', 'late', 'half-day')


class TimeEntry(db.Model):
    """Clock-in / clock-out record"""
    __tablename__ = 'time_entries'
    __table_args__ = (
        db.UniqueConstraint('employee_id', 'date', name='uq_time_entry_employee_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)

    date = db.Column(db.Date, nullable=False, index=True)
    check_in = db.Column(db.DateTime)
    check_out = db.Column(db.DateTime)
    status = db.Column(db.String(20), nullable=False, default='present', index=True)  # present, absent, late, half-day
    hours_worked = db.Column(db.Float)
    overtime = db.Column(db.Float, default=0)
    reason = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('time_entries', lazy='dynamic',
                                                              cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<TimeEntry {self.employee_id} {self.date} {self.status}>'

    def compute_hours(self, standard_hours=8.0, half_day_hours=4.0):
        """
        Recompute hours_worked and overtime from check_in/check_out

        A day shorter than half_day_hours becomes 'half-day'; a 'late' status
        is otherwise kept.
        """
        if not self.check_in or not self.check_out:
            self.hours_worked = None
            self.overtime = 0
            return

        seconds = (self.check_out - self.check_in).total_seconds()
        self.hours_worked = round(seconds / 3600.0, 2)
        self.overtime = round(max(0.0, self.hours_worked - standard_hours), 2)

        if self.hours_worked < half_day_hours:
            self.status = 'half-day'

    def to_dict(self, include_employee=False):
        data = {
            'id': self.id,
            'employee_id': self.employee_id,
            'date': self.date.isoformat() if self.date else None,
            'check_in': self.check_in.isoformat() if self.check_in else None,
            'check_out': self.check_out.isoformat() if self.check_out else None,
            'status': self.status,
            'hours_worked': self.hours_worked,
            'overtime': self.overtime,
            'reason': self.reason,
        }
        if include_employee:
            data['employee_name'] = self.employee.full_name if self.employee else 'Unknown'
        return data
