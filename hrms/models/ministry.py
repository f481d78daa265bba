"""
Ministry Model
Top level of the organisation structure
"""
from datetime import datetime
from hrms import db


class Ministry(db.Model):
    """Ministry that owns one or more sections"""
    __tablename__ = 'ministries'

    id = db.Column(db.Integer, primary_key=True)
    ministry_name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    sections = db.relationship('Section', back_populates='ministry', lazy='dynamic')

    def __repr__(self):
        return f'<Ministry {self.ministry_name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'ministry_name': self.ministry_name,
            'description': self.description,
            'section_count': self.sections.count(),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
