"""
Concurrency Form Model
Conflict-of-interest / outside employment declarations
"""
from datetime import datetime
from hrms import db


CONCURRENCY_STATUSES = ('draft', 'submitted', 'approved', 'rejected', 'requires_revision')
EDITABLE_STATUSES = ('draft', 'requires_revision')


class ConcurrencyForm(db.Model):
    __tablename__ = 'concurrency_forms'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)
    form_type = db.Column(db.String(50), nullable=False, default='concurrency_declaration')

    # Form sections (JSON)
    personal_info = db.Column(db.JSON)
    outside_employment = db.Column(db.JSON)
    conflict_of_interest = db.Column(db.JSON)
    gifts_benefits = db.Column(db.JSON)
    declaration = db.Column(db.JSON)

    status = db.Column(db.String(30), nullable=False, default='draft', index=True)
    submission_date = db.Column(db.DateTime)
    review_date = db.Column(db.DateTime)
    reviewed_by = db.Column(db.String(200))
    reviewer_notes = db.Column(db.Text)

    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('concurrency_forms', lazy='dynamic',
                                                              cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<ConcurrencyForm {self.id} {self.status}>'

    @property
    def is_editable(self):
        return self.status in EDITABLE_STATUSES

    def submit(self):
        self.status = 'submitted'
        self.submission_date = datetime.utcnow()

    def review(self, decision, reviewed_by, notes=None):
        self.status = decision
        self.reviewed_by = reviewed_by
        self.reviewer_notes = notes
        self.review_date = datetime.utcnow()

    def to_dict(self, include_employee=False):
        data = {
            'id': self.id,
            'employee_id': self.employee_id,
            'form_type': self.form_type,
            'personal_info': self.personal_info,
            'outside_employment': self.outside_employment,
            'conflict_of_interest': self.conflict_of_interest,
            'gifts_benefits': self.gifts_benefits,
            'declaration': self.declaration,
            'status': self.status,
            'submission_date': self.submission_date.isoformat() if self.submission_date else None,
            'review_date': self.review_date.isoformat() if self.review_date else None,
            'reviewed_by': self.reviewed_by,
            'reviewer_notes': self.reviewer_notes,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_employee:
            data['employee_name'] = self.employee.full_name if self.employee else 'Unknown'
        return data
