"""
Job Posting Model
Open positions advertised by a section
"""
from datetime import datetime
from hrms import db


JOB_STATUSES = ('draft', 'published', 'closed')


class JobPosting(db.Model):
    __tablename__ = 'job_postings'

    id = db.Column(db.Integer, primary_key=True)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True, index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    title = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200))
    employment_type = db.Column(db.String(50))  # full-time, part-time, contract, internship
    description = db.Column(db.Text)
    requirements = db.Column(db.Text)

    salary_range_min = db.Column(db.Numeric(12, 2))
    salary_range_max = db.Column(db.Numeric(12, 2))

    status = db.Column(db.String(20), nullable=False, default='draft', index=True)  # draft, published, closed
    published_at = db.Column(db.DateTime)
    closed_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    section = db.relationship('Section')
    created_by = db.relationship('User')

    def __repr__(self):
        return f'<JobPosting {self.title} - {self.status}>'

    def publish(self):
        """Returns False when the posting is not a draft"""
        if self.status != 'draft':
            return False
        self.status = 'published'
        self.published_at = datetime.utcnow()
        return True

    def close(self):
        if self.status != 'published':
            return False
        self.status = 'closed'
        self.closed_at = datetime.utcnow()
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'section_id': self.section_id,
            'section_name': self.section.section_name if self.section else None,
            'location': self.location,
            'employment_type': self.employment_type,
            'description': self.description,
            'requirements': self.requirements,
            'salary_range_min': float(self.salary_range_min) if self.salary_range_min is not None else None,
            'salary_range_max': float(self.salary_range_max) if self.salary_range_max is not None else None,
            'status': self.status,
            'published_at': self.published_at.isoformat() if self.published_at else None,
            'closed_at': self.closed_at.isoformat() if self.closed_at else None,
            'candidate_count': self.candidates.count(),
        }
