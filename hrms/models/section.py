"""
Section Model
A section (department) groups positions and employees
"""
from datetime import datetime
from hrms import db


class Section(db.Model):
    """Section / department"""
    __tablename__ = 'sections'

    id = db.Column(db.Integer, primary_key=True)
    ministry_id = db.Column(db.Integer, db.ForeignKey('ministries.id', ondelete='SET NULL'), nullable=True, index=True)

    section_name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text)

    # Denormalized count of active employees, refreshed by update_section_employee_count
    employee_count = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime)

    ministry = db.relationship('Ministry', back_populates='sections')
    positions = db.relationship('Position', back_populates='section', lazy='dynamic')
    employees = db.relationship('Employee', back_populates='section', lazy='dynamic')

    def __repr__(self):
        return f'<Section {self.section_name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'section_name': self.section_name,
            'description': self.description,
            'ministry_id': self.ministry_id,
            'ministry_name': self.ministry.ministry_name if self.ministry else None,
            'employee_count': self.employee_count,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
