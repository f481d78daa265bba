"""
Benefit Models
Benefit plans and employee enrollments
"""
from datetime import datetime, date
from hrms import db


class Benefit(db.Model):
    __tablename__ = 'benefits'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    benefit_type = db.Column(db.String(50))  # health, dental, retirement, ...
    provider = db.Column(db.String(200))
    cost = db.Column(db.Numeric(12, 2), default=0)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    enrollments = db.relationship('EmployeeBenefit', back_populates='benefit', lazy='dynamic',
                                  cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Benefit {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'benefit_type': self.benefit_type,
            'provider': self.provider,
            'cost': float(self.cost) if self.cost is not None else 0.0,
            'is_active': self.is_active,
            'enrolled_count': self.enrollments.count(),
        }


class EmployeeBenefit(db.Model):
    """Enrollment of an employee in a benefit plan"""
    __tablename__ = 'employee_benefits'
    __table_args__ = (
        db.UniqueConstraint('employee_id', 'benefit_id', name='uq_employee_benefit'),
    )

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)
    benefit_id = db.Column(db.Integer, db.ForeignKey('benefits.id', ondelete='CASCADE'), nullable=False, index=True)
    enrolled_on = db.Column(db.Date, default=date.today, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('benefit_enrollments', lazy='dynamic',
                                                              cascade='all, delete-orphan'))
    benefit = db.relationship('Benefit', back_populates='enrollments')

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'benefit_id': self.benefit_id,
            'benefit_name': self.benefit.name if self.benefit else None,
            'enrolled_on': self.enrolled_on.isoformat() if self.enrolled_on else None,
        }
