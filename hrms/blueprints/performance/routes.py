from flask import request, jsonify, g
from flask_login import login_required, current_user
from hrms.blueprints.performance import performance_bp
from hrms.schemas import PerformanceReviewSchema, PerformanceUpdateSchema
from hrms.services.performance_service import performance_service
from hrms.utils.security_decorators import require_role, require_employee_record


@performance_bp.route('/me', methods=['GET'])
@login_required
@require_employee_record
def my_reviews():
    """Own performance history, newest first"""
    reviews = performance_service.get_performance_by_employee(g.current_employee.id)
    return jsonify({'success': True, 'reviews': [r.to_dict() for r in reviews]})


@performance_bp.route('', methods=['GET'])
@login_required
@require_role('admin')
def list_reviews():
    employee_id = request.args.get('employee_id', type=int)
    if employee_id:
        reviews = [r.to_dict(include_employee=True) for r in performance_service.get_performance_by_employee(employee_id)]
    else:
        reviews = performance_service.get_all_performances()
    return jsonify({'success': True, 'reviews': reviews})


@performance_bp.route('', methods=['POST'])
@login_required
@require_role('admin')
def create_review():
    payload = PerformanceReviewSchema.model_validate(request.get_json(silent=True) or {})
    review = performance_service.create_performance(payload.model_dump(), reviewer_id=current_user.id)
    return jsonify({'success': True, 'review': review.to_dict(include_employee=True)}), 201


@performance_bp.route('/summary', methods=['GET'])
@login_required
@require_role('admin')
def section_summary():
    summary = performance_service.get_section_performance_summary(request.args.get('section_id', type=int))
    return jsonify({'success': True, 'summary': summary})


@performance_bp.route('/<int:review_id>', methods=['GET'])
@login_required
@require_role('admin')
def get_review(review_id):
    review = performance_service.get_performance_by_id(review_id)
    return jsonify({'success': True, 'review': review.to_dict(include_employee=True)})


@performance_bp.route('/<int:review_id>', methods=['PATCH', 'PUT'])
@login_required
@require_role('admin')
def update_review(review_id):
    payload = PerformanceUpdateSchema.model_validate(request.get_json(silent=True) or {})
    review = performance_service.update_performance(review_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'review': review.to_dict(include_employee=True)})


@performance_bp.route('/<int:review_id>', methods=['DELETE'])
@login_required
@require_role('admin')
def delete_review(review_id):
    performance_service.delete_performance(review_id)
    return jsonify({'success': True})
