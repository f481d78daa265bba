"""
Payroll Model
One pay record per employee per pay date
"""
from datetime import datetime
from decimal import Decimal
from hrms import db


PAYMENT_METHODS = ('bank', 'cash', 'check')


class Payroll(db.Model):
    __tablename__ = 'payrolls'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)

    salary = db.Column(db.Numeric(12, 2), nullable=False)
    bonus = db.Column(db.Numeric(12, 2), default=0)
    deductions = db.Column(db.Numeric(12, 2), default=0)
    pay_date = db.Column(db.Date, nullable=False, index=True)
    payment_method = db.Column(db.String(20), nullable=False, default='bank')  # bank, cash, check

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('payrolls', lazy='dynamic',
                                                              cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<Payroll employee={self.employee_id} {self.pay_date}>'

    @property
    def net_pay(self):
        return (Decimal(self.salary or 0) + Decimal(self.bonus or 0)) - Decimal(self.deductions or 0)

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'employee_name': self.employee.full_name if self.employee else 'Unknown',
            'salary': float(self.salary) if self.salary is not None else 0.0,
            'bonus': float(self.bonus) if self.bonus is not None else 0.0,
            'deductions': float(self.deductions) if self.deductions is not None else 0.0,
            'net_pay': float(self.net_pay),
            'pay_date': self.pay_date.isoformat() if self.pay_date else None,
            'payment_method': self.payment_method,
        }
