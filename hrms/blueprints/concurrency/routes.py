from flask import request, jsonify, g
from flask_login import login_required, current_user
from hrms.blueprints.concurrency import concurrency_bp
from hrms.schemas import ConcurrencyFormSchema, ConcurrencyUpdateSchema, ConcurrencyReviewSchema
from hrms.services.concurrency_service import concurrency_service
from hrms.services.employee_service import employee_service
from hrms.services.errors import PermissionDenied
from hrms.utils.security_decorators import require_role, require_employee_record

REVIEWER_ROLES = ('admin', 'manager')


def _get_own_form(form_id):
    """Load a form the caller may manage: their own, or any form for a reviewer"""
    form = concurrency_service.get_concurrency_form_by_id(form_id)
    if current_user.has_role(*REVIEWER_ROLES):
        return form

    employee = current_user.employee_record
    if not employee or form.employee_id != employee.id:
        raise PermissionDenied('You can only manage your own declarations')
    return form


# ===== Employee declarations =====

@concurrency_bp.route('', methods=['POST'])
@login_required
def create_form():
    payload = ConcurrencyFormSchema.model_validate(request.get_json(silent=True) or {})

    if payload.employee_id and current_user.has_role(*REVIEWER_ROLES):
        employee = employee_service.get_employee_by_id(payload.employee_id)
    else:
        employee = employee_service.get_employee_by_user_id(current_user.id)

    form = concurrency_service.create_concurrency_form(employee, payload.model_dump(exclude={'employee_id'}))
    return jsonify({'success': True, 'form': form.to_dict()}), 201


@concurrency_bp.route('/me', methods=['GET'])
@login_required
@require_employee_record
def my_forms():
    forms = concurrency_service.get_concurrency_forms_by_employee(g.current_employee.id)
    stats = concurrency_service.get_concurrency_form_stats(g.current_employee.id)
    return jsonify({'success': True, 'forms': [f.to_dict() for f in forms], 'stats': stats})


@concurrency_bp.route('/<int:form_id>', methods=['GET'])
@login_required
def get_form(form_id):
    form = _get_own_form(form_id)
    return jsonify({'success': True, 'form': form.to_dict(include_employee=True)})


@concurrency_bp.route('/<int:form_id>', methods=['PATCH', 'PUT'])
@login_required
def update_form(form_id):
    _get_own_form(form_id)
    payload = ConcurrencyUpdateSchema.model_validate(request.get_json(silent=True) or {})
    form = concurrency_service.update_concurrency_form(form_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'form': form.to_dict()})


@concurrency_bp.route('/<int:form_id>/submit', methods=['POST'])
@login_required
def submit_form(form_id):
    _get_own_form(form_id)
    form = concurrency_service.submit_concurrency_form(form_id)
    return jsonify({'success': True, 'form': form.to_dict()})


@concurrency_bp.route('/<int:form_id>', methods=['DELETE'])
@login_required
def delete_form(form_id):
    _get_own_form(form_id)
    concurrency_service.delete_concurrency_form(form_id)
    return jsonify({'success': True})


# ===== Review =====

@concurrency_bp.route('', methods=['GET'])
@login_required
@require_role(*REVIEWER_ROLES)
def list_forms():
    forms = concurrency_service.get_all_concurrency_forms(
        status=request.args.get('status'),
        employee_id=request.args.get('employee_id', type=int)
    )
    return jsonify({'success': True, 'forms': [f.to_dict(include_employee=True) for f in forms]})


@concurrency_bp.route('/stats', methods=['GET'])
@login_required
@require_role(*REVIEWER_ROLES)
def form_stats():
    stats = concurrency_service.get_concurrency_form_stats(request.args.get('employee_id', type=int))
    return jsonify({'success': True, 'stats': stats})


@concurrency_bp.route('/<int:form_id>/review', methods=['POST'])
@login_required
@require_role(*REVIEWER_ROLES)
def review_form(form_id):
    payload = ConcurrencyReviewSchema.model_validate(request.get_json(silent=True) or {})
    form = concurrency_service.review_concurrency_form(
        form_id,
        payload.decision,
        current_user.full_name,
        reviewer_notes=payload.reviewer_notes,
        reviewer_id=current_user.id
    )
    return jsonify({'success': True, 'form': form.to_dict(include_employee=True)})
