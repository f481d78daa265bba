"""
Recruitment Service
Job postings, candidates and interviews
"""
from typing import List, Optional
from flask import current_app
from hrms import db
from hrms.models.job_posting import JobPosting
from hrms.models.candidate import Candidate
from hrms.models.interview import Interview
from hrms.services.errors import InvalidStateError, NotFoundError, ServiceError
from hrms.services.organization_service import organization_service


class RecruitmentService:
    """Service for the recruitment pipeline"""

    # ===== JOB POSTINGS =====

    def create_job_posting(self, data: dict, created_by_id: Optional[int] = None) -> JobPosting:
        if data.get('section_id'):
            organization_service.get_section_by_id(data['section_id'])

        job = JobPosting(created_by_id=created_by_id, status='draft', **data)
        db.session.add(job)
        db.session.commit()
        return job

    def get_job_posting_by_id(self, job_id: int) -> JobPosting:
        job = db.session.get(JobPosting, job_id)
        if not job:
            raise NotFoundError('Job posting not found')
        return job

    def get_all_job_postings(self, status: Optional[str] = None) -> List[JobPosting]:
        query = JobPosting.query
        if status:
            query = query.filter_by(status=status)
        return query.order_by(JobPosting.created_at.desc(), JobPosting.id.desc()).all()

    def update_job_posting(self, job_id: int, data: dict) -> JobPosting:
        job = self.get_job_posting_by_id(job_id)
        if job.status == 'closed':
            raise InvalidStateError('Closed job postings cannot be edited')
        if data.get('section_id'):
            organization_service.get_section_by_id(data['section_id'])

        for field, value in data.items():
            if value is not None:
                setattr(job, field, value)
        db.session.commit()
        return job

    def delete_job_posting(self, job_id: int) -> None:
        job = self.get_job_posting_by_id(job_id)
        db.session.delete(job)
        db.session.commit()

    def publish_job_posting(self, job_id: int) -> JobPosting:
        job = self.get_job_posting_by_id(job_id)
        if not job.publish():
            raise InvalidStateError(f'Only draft postings can be published (posting is {job.status})')
        db.session.commit()
        current_app.logger.info(f'Job posting {job.id} published')
        return job

    def close_job_posting(self, job_id: int) -> JobPosting:
        job = self.get_job_posting_by_id(job_id)
        if not job.close():
            raise InvalidStateError(f'Only published postings can be closed (posting is {job.status})')
        db.session.commit()
        return job

    # ===== CANDIDATES =====

    def create_candidate(self, data: dict) -> Candidate:
        if data.get('job_posting_id'):
            job = self.get_job_posting_by_id(data['job_posting_id'])
            if job.status != 'published':
                raise InvalidStateError('Candidates can only apply to published postings')

        candidate = Candidate(notes=[], **data)
        db.session.add(candidate)
        db.session.commit()
        return candidate

    def get_candidate_by_id(self, candidate_id: int) -> Candidate:
        candidate = db.session.get(Candidate, candidate_id)
        if not candidate:
            raise NotFoundError('Candidate not found')
        return candidate

    def get_all_candidates(self, status: Optional[str] = None,
                           job_posting_id: Optional[int] = None) -> List[Candidate]:
        query = Candidate.query
        if status:
            query = query.filter_by(status=status)
        if job_posting_id:
            query = query.filter_by(job_posting_id=job_posting_id)
        return query.order_by(Candidate.applied_date.desc(), Candidate.id.desc()).all()

    def update_candidate(self, candidate_id: int, data: dict) -> Candidate:
        candidate = self.get_candidate_by_id(candidate_id)
        if data.get('job_posting_id'):
            self.get_job_posting_by_id(data['job_posting_id'])
        for field, value in data.items():
            if value is not None:
                setattr(candidate, field, value)
        db.session.commit()
        return candidate

    def update_candidate_status(self, candidate_id: int, status: str, reason: Optional[str] = None,
                                updated_by: Optional[str] = None) -> Candidate:
        candidate = self.get_candidate_by_id(candidate_id)
        if candidate.status in ('hired', 'rejected') and status != candidate.status:
            raise InvalidStateError(f'Candidate is already {candidate.status}')
        candidate.update_status(status, reason, updated_by)
        db.session.commit()
        return candidate

    def delete_candidate(self, candidate_id: int) -> None:
        candidate = self.get_candidate_by_id(candidate_id)
        db.session.delete(candidate)
        db.session.commit()

    # ===== INTERVIEWS =====

    def create_interview(self, data: dict) -> Interview:
        candidate = self.get_candidate_by_id(data['candidate_id'])
        if candidate.status in ('hired', 'rejected'):
            raise InvalidStateError(f'Cannot schedule an interview for a {candidate.status} candidate')

        interview = Interview(**data)
        db.session.add(interview)

        if candidate.status in ('applied', 'screening'):
            candidate.update_status('interviewing', 'Interview scheduled')

        db.session.commit()
        return interview

    def get_interview_by_id(self, interview_id: int) -> Interview:
        interview = db.session.get(Interview, interview_id)
        if not interview:
            raise NotFoundError('Interview not found')
        return interview

    def get_interviews(self, candidate_id: Optional[int] = None) -> List[Interview]:
        query = Interview.query
        if candidate_id:
            query = query.filter_by(candidate_id=candidate_id)
        return query.order_by(Interview.scheduled_date.asc()).all()

    def update_interview(self, interview_id: int, data: dict) -> Interview:
        interview = self.get_interview_by_id(interview_id)
        if interview.status == 'cancelled' and data.get('status') != 'scheduled':
            raise InvalidStateError('Cancelled interviews cannot be edited')
        if data.get('score') is not None and (data.get('status') or interview.status) != 'completed':
            raise ServiceError('Only completed interviews can be scored')

        for field, value in data.items():
            if value is not None:
                setattr(interview, field, value)
        db.session.commit()
        return interview

    def delete_interview(self, interview_id: int) -> None:
        interview = self.get_interview_by_id(interview_id)
        db.session.delete(interview)
        db.session.commit()


# Singleton instance
recruitment_service = RecruitmentService()
