"""
Candidate Model
Applicants moving through the recruitment pipeline
"""
from datetime import datetime, date
from hrms import db


CANDIDATE_STATUSES = ('applied', 'screening', 'interviewing', 'offer_extended', 'hired', 'rejected')


class Candidate(db.Model):
    __tablename__ = 'candidates'

    id = db.Column(db.Integer, primary_key=True)
    job_posting_id = db.Column(db.Integer, db.ForeignKey('job_postings.id', ondelete='SET NULL'), nullable=True, index=True)

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50))

    position = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(30), nullable=False, default='applied', index=True)
    applied_date = db.Column(db.Date, nullable=False, default=date.today)
    resume_url = db.Column(db.String(500))
    notes = db.Column(db.JSON, default=list)  # status history

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    job_posting = db.relationship('JobPosting', backref=db.backref('candidates', lazy='dynamic'))
    interviews = db.relationship('Interview', back_populates='candidate', lazy='dynamic',
                                 cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Candidate {self.full_name} - {self.position}>'

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def update_status(self, new_status, reason=None, updated_by=None):
        """
        Change status and append the change to the notes history

        Args:
            new_status: New status value
            reason: Optional reason for the change
            updated_by: Name of the person making the change
        """
        old_status = self.status
        self.status = new_status

        entry = {
            'note': f'Status changed from {old_status} to {new_status}' + (f': {reason}' if reason else ''),
            'date': datetime.utcnow().isoformat(),
            'updated_by': updated_by,
        }
        # Reassign so SQLAlchemy sees the JSON change
        self.notes = list(self.notes or []) + [entry]

    def to_dict(self):
        return {
            'id': self.id,
            'job_posting_id': self.job_posting_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'position': self.position,
            'status': self.status,
            'applied_date': self.applied_date.isoformat() if self.applied_date else None,
            'resume_url': self.resume_url,
            'notes': self.notes or [],
        }
