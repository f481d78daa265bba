"""
Employee Details Model
Extended personal information kept apart from the core employee record
"""
from datetime import datetime
from hrms import db


DETAIL_SECTIONS = ('address', 'emergency_contact', 'banking_info', 'additional_info')


class EmployeeDetails(db.Model):
    """Address, emergency contact, banking and additional info for one employee"""
    __tablename__ = 'employee_details'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'),
                            nullable=False, unique=True, index=True)

    # Each section is a JSON object
    address = db.Column(db.JSON)
    emergency_contact = db.Column(db.JSON)
    banking_info = db.Column(db.JSON)
    additional_info = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', back_populates='details')

    def __repr__(self):
        return f'<EmployeeDetails employee={self.employee_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'address': self.address,
            'emergency_contact': self.emergency_contact,
            'banking_info': self.banking_info,
            'additional_info': self.additional_info,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
