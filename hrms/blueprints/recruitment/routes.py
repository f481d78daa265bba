from flask import request, jsonify
from flask_login import login_required, current_user
from hrms.blueprints.recruitment import recruitment_bp
from hrms.schemas import (
    JobPostingSchema, JobPostingUpdateSchema,
    CandidateSchema, CandidateUpdateSchema, CandidateStatusSchema,
    InterviewSchema, InterviewUpdateSchema,
)
from hrms.services.recruitment_service import recruitment_service
from hrms.utils.security_decorators import require_role


@recruitment_bp.before_request
@login_required
@require_role('admin')
def check_access():
    """Recruitment is admin only"""
    pass


# ===== Job postings =====

@recruitment_bp.route('/jobs', methods=['GET'])
def list_jobs():
    jobs = recruitment_service.get_all_job_postings(status=request.args.get('status'))
    return jsonify({'success': True, 'jobs': [j.to_dict() for j in jobs]})


@recruitment_bp.route('/jobs', methods=['POST'])
def create_job():
    payload = JobPostingSchema.model_validate(request.get_json(silent=True) or {})
    job = recruitment_service.create_job_posting(payload.model_dump(), created_by_id=current_user.id)
    return jsonify({'success': True, 'job': job.to_dict()}), 201


@recruitment_bp.route('/jobs/<int:job_id>', methods=['GET'])
def get_job(job_id):
    return jsonify({'success': True, 'job': recruitment_service.get_job_posting_by_id(job_id).to_dict()})


@recruitment_bp.route('/jobs/<int:job_id>', methods=['PATCH', 'PUT'])
def update_job(job_id):
    payload = JobPostingUpdateSchema.model_validate(request.get_json(silent=True) or {})
    job = recruitment_service.update_job_posting(job_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'job': job.to_dict()})


@recruitment_bp.route('/jobs/<int:job_id>', methods=['DELETE'])
def delete_job(job_id):
    recruitment_service.delete_job_posting(job_id)
    return jsonify({'success': True})


@recruitment_bp.route('/jobs/<int:job_id>/publish', methods=['POST'])
def publish_job(job_id):
    job = recruitment_service.publish_job_posting(job_id)
    return jsonify({'success': True, 'job': job.to_dict()})


@recruitment_bp.route('/jobs/<int:job_id>/close', methods=['POST'])
def close_job(job_id):
    job = recruitment_service.close_job_posting(job_id)
    return jsonify({'success': True, 'job': job.to_dict()})


# ===== Candidates =====

@recruitment_bp.route('/candidates', methods=['GET'])
def list_candidates():
    candidates = recruitment_service.get_all_candidates(
        status=request.args.get('status'),
        job_posting_id=request.args.get('job_posting_id', type=int)
    )
    return jsonify({'success': True, 'candidates': [c.to_dict() for c in candidates]})


@recruitment_bp.route('/candidates', methods=['POST'])
def create_candidate():
    payload = CandidateSchema.model_validate(request.get_json(silent=True) or {})
    candidate = recruitment_service.create_candidate(payload.model_dump())
    return jsonify({'success': True, 'candidate': candidate.to_dict()}), 201


@recruitment_bp.route('/candidates/<int:candidate_id>', methods=['GET'])
def get_candidate(candidate_id):
    candidate = recruitment_service.get_candidate_by_id(candidate_id)
    data = candidate.to_dict()
    data['interviews'] = [i.to_dict() for i in recruitment_service.get_interviews(candidate_id=candidate.id)]
    return jsonify({'success': True, 'candidate': data})


@recruitment_bp.route('/candidates/<int:candidate_id>', methods=['PATCH', 'PUT'])
def update_candidate(candidate_id):
    payload = CandidateUpdateSchema.model_validate(request.get_json(silent=True) or {})
    candidate = recruitment_service.update_candidate(candidate_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'candidate': candidate.to_dict()})


@recruitment_bp.route('/candidates/<int:candidate_id>/status', methods=['POST'])
def update_candidate_status(candidate_id):
    payload = CandidateStatusSchema.model_validate(request.get_json(silent=True) or {})
    candidate = recruitment_service.update_candidate_status(
        candidate_id, payload.status, reason=payload.reason, updated_by=current_user.full_name
    )
    return jsonify({'success': True, 'candidate': candidate.to_dict()})


@recruitment_bp.route('/candidates/<int:candidate_id>', methods=['DELETE'])
def delete_candidate(candidate_id):
    recruitment_service.delete_candidate(candidate_id)
    return jsonify({'success': True})


# ===== Interviews =====

@recruitment_bp.route('/interviews', methods=['GET'])
def list_interviews():
    interviews = recruitment_service.get_interviews(candidate_id=request.args.get('candidate_id', type=int))
    return jsonify({'success': True, 'interviews': [i.to_dict() for i in interviews]})


@recruitment_bp.route('/interviews', methods=['POST'])
def create_interview():
    payload = InterviewSchema.model_validate(request.get_json(silent=True) or {})
    interview = recruitment_service.create_interview(payload.model_dump())
    return jsonify({'success': True, 'interview': interview.to_dict()}), 201


@recruitment_bp.route('/interviews/<int:interview_id>', methods=['GET'])
def get_interview(interview_id):
    return jsonify({'success': True, 'interview': recruitment_service.get_interview_by_id(interview_id).to_dict()})


@recruitment_bp.route('/interviews/<int:interview_id>', methods=['PATCH', 'PUT'])
def update_interview(interview_id):
    payload = InterviewUpdateSchema.model_validate(request.get_json(silent=True) or {})
    interview = recruitment_service.update_interview(interview_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'interview': interview.to_dict()})


@recruitment_bp.route('/interviews/<int:interview_id>', methods=['DELETE'])
def delete_interview(interview_id):
    recruitment_service.delete_interview(interview_id)
    return jsonify({'success': True})
