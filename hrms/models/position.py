"""
Position Model
A job title inside a section
"""
from datetime import datetime
from hrms import db


class Position(db.Model):
    """Position / job title"""
    __tablename__ = 'positions'

    id = db.Column(db.Integer, primary_key=True)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True, index=True)

    position_title = db.Column(db.String(200), nullable=False, index=True)
    salary_grade = db.Column(db.String(50))
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime)

    section = db.relationship('Section', back_populates='positions')

    def __repr__(self):
        return f'<Position {self.position_title}>'

    def to_dict(self):
        return {
            'id': self.id,
            'position_title': self.position_title,
            'section_id': self.section_id,
            'section_name': self.section.section_name if self.section else None,
            'salary_grade': self.salary_grade,
            'description': self.description,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
