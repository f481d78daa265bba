"""
Employee Activity Model
Timeline of leave and concurrency events for an employee
"""
from datetime import datetime
from hrms import db


ACTIVITY_TYPES = ('leave', 'concurrency')


class EmployeeActivity(db.Model):
    __tablename__ = 'employee_activities'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)

    type = db.Column(db.String(20), nullable=False)  # leave, concurrency
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('activities', lazy='dynamic',
                                                              cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<EmployeeActivity {self.type} employee={self.employee_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'type': self.type,
            'description': self.description,
            'date': self.date.isoformat() if self.date else None,
            'is_active': self.is_active,
        }
