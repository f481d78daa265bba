"""
Employee Document Model
One bundle of identity and qualification documents per employee
"""
from datetime import datetime
from hrms import db


# Slot name -> human readable label
DOCUMENT_SLOTS = {
    'national_id_document': 'National ID',
    'passport_photo': 'Passport Photo',
    'academic_certificates': 'Academic Certificates',
    'police_clearance': 'Police Clearance',
    'medical_certificate': 'Medical Certificate',
    'driver_license': 'Driver License',
}


class EmployeeDocument(db.Model):
    """Document bundle; files live in Cloudinary, only URLs are stored"""
    __tablename__ = 'employee_documents'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)

    national_id = db.Column(db.String(100), nullable=False)
    national_id_document = db.Column(db.String(500))
    passport_photo = db.Column(db.String(500), nullable=False)
    academic_certificates = db.Column(db.JSON, nullable=False, default=list)  # list of URLs
    police_clearance = db.Column(db.String(500))
    medical_certificate = db.Column(db.String(500))
    driver_license = db.Column(db.String(500))

    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime)

    employee = db.relationship('Employee', backref=db.backref('documents', lazy='dynamic'))

    def __repr__(self):
        return f'<EmployeeDocument employee={self.employee_id}>'

    def active_document_types(self):
        """Labels of the slots that hold at least one file"""
        types = []
        for slot, label in DOCUMENT_SLOTS.items():
            if getattr(self, slot):
                types.append(label)
        return types

    def to_dict(self, include_employee=False):
        data = {
            'id': self.id,
            'employee_id': self.employee_id,
            'national_id': self.national_id,
            'national_id_document': self.national_id_document,
            'passport_photo': self.passport_photo,
            'academic_certificates': self.academic_certificates or [],
            'police_clearance': self.police_clearance,
            'medical_certificate': self.medical_certificate,
            'driver_license': self.driver_license,
            'is_active': self.is_active,
            'uploaded_at': self.uploaded_at.isoformat() if self.uploaded_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_employee:
            data['employee_name'] = self.employee.full_name if self.employee else 'Unknown Employee'
        return data
