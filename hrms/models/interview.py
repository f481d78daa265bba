"""
Interview Model
Scheduled interviews for candidates
"""
from datetime import datetime
from hrms import db


INTERVIEW_STATUSES = ('scheduled', 'completed', 'cancelled')


class Interview(db.Model):
    __tablename__ = 'interviews'

    id = db.Column(db.Integer, primary_key=True)
    candidate_id = db.Column(db.Integer, db.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False, index=True)

    interview_type = db.Column(db.String(50), nullable=False)  # phone_screen, technical, panel, final
    scheduled_date = db.Column(db.DateTime, nullable=False, index=True)
    duration_minutes = db.Column(db.Integer, default=60)
    location = db.Column(db.String(500))
    interviewers = db.Column(db.JSON, default=list)  # names or emails

    feedback = db.Column(db.Text)
    score = db.Column(db.Float)
    status = db.Column(db.String(20), nullable=False, default='scheduled')  # scheduled, completed, cancelled

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    candidate = db.relationship('Candidate', back_populates='interviews')

    def __repr__(self):
        return f'<Interview {self.interview_type} for Candidate {self.candidate_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'candidate_id': self.candidate_id,
            'candidate_name': self.candidate.full_name if self.candidate else None,
            'interview_type': self.interview_type,
            'scheduled_date': self.scheduled_date.isoformat() if self.scheduled_date else None,
            'duration_minutes': self.duration_minutes,
            'location': self.location,
            'interviewers': self.interviewers or [],
            'feedback': self.feedback,
            'score': self.score,
            'status': self.status,
        }
