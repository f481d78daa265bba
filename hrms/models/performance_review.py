"""
Performance Review Model
"""
from datetime import datetime, date
from hrms import db


class PerformanceReview(db.Model):
    __tablename__ = 'performance_reviews'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)
    reviewer_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    review_date = db.Column(db.Date, nullable=False, default=date.today, index=True)
    score = db.Column(db.Integer, nullable=False)  # 1-5
    review = db.Column(db.Text)
    strengths = db.Column(db.Text)
    areas_for_improvement = db.Column(db.Text)
    comments = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = db.relationship('Employee', backref=db.backref('performance_reviews', lazy='dynamic',
                                                              cascade='all, delete-orphan'))
    reviewer = db.relationship('User')

    def __repr__(self):
        return f'<PerformanceReview employee={self.employee_id} score={self.score}>'

    def to_dict(self, include_employee=False):
        data = {
            'id': self.id,
            'employee_id': self.employee_id,
            'reviewer_id': self.reviewer_id,
            'reviewer_name': self.reviewer.full_name if self.reviewer else None,
            'review_date': self.review_date.isoformat() if self.review_date else None,
            'score': self.score,
            'review': self.review,
            'strengths': self.strengths,
            'areas_for_improvement': self.areas_for_improvement,
            'comments': self.comments,
        }
        if include_employee:
            employee = self.employee
            data['employee_name'] = employee.full_name if employee else 'Unknown'
            data['section_name'] = employee.section_name if employee else 'Unknown'
            data['position_title'] = employee.position_title if employee else 'Unknown'
        return data
