from datetime import date
from flask import request, jsonify, g, abort
from flask_login import login_required, current_user
from hrms.blueprints.leaves import leaves_bp
from hrms.models.employee import Employee
from hrms.schemas import (
    LeaveRequestSchema, LeaveUpdateSchema, LeaveValidationSchema,
    LeaveDecisionSchema, LeaveBalanceSchema,
)
from hrms.services.leave_service import leave_service
from hrms.services.errors import PermissionDenied
from hrms.utils.query_params import get_date_arg, get_year_arg
from hrms.utils.security_decorators import require_role, require_employee_record

REVIEWER_ROLES = ('admin', 'manager')


def _is_reviewer():
    return current_user.has_role(*REVIEWER_ROLES)


def _own_employee_or_404():
    employee = Employee.query.filter_by(user_id=current_user.id, is_active=True).first()
    if not employee:
        abort(404, description="No employee record is linked to your account")
    return employee


def _resolve_employee_id(requested_id):
    """Reviewers may act for any employee; everyone else only for themselves"""
    if requested_id and _is_reviewer():
        return requested_id

    employee = _own_employee_or_404()
    if requested_id and requested_id != employee.id:
        raise PermissionDenied('You can only manage your own leave requests')
    return employee.id


# ===== Employee requests =====

@leaves_bp.route('', methods=['POST'])
@login_required
def create_leave_request():
    payload = LeaveRequestSchema.model_validate(request.get_json(silent=True) or {})
    employee_id = _resolve_employee_id(payload.employee_id)

    leave_request = leave_service.create_leave_request(employee_id, payload.model_dump())
    return jsonify({'success': True, 'leave_request': leave_request.to_dict()}), 201


@leaves_bp.route('/me', methods=['GET'])
@login_required
@require_employee_record
def my_leave_requests():
    requests = leave_service.get_employee_leave_requests(g.current_employee.id, status=request.args.get('status'))
    return jsonify({'success': True, 'leave_requests': [r.to_dict() for r in requests]})


@leaves_bp.route('/validate', methods=['POST'])
@login_required
def validate_leave_request():
    """Dry run: dates, overlaps and balance for a prospective request"""
    payload = LeaveValidationSchema.model_validate(request.get_json(silent=True) or {})
    employee_id = _resolve_employee_id(payload.employee_id)

    result = leave_service.validate_leave_request(
        employee_id, payload.start_date, payload.end_date, payload.leave_type
    )
    return jsonify({'success': True, **result})


@leaves_bp.route('/remaining', methods=['GET'])
@login_required
def remaining_days():
    employee_id = _resolve_employee_id(request.args.get('employee_id', type=int))
    leave_type = request.args.get('leave_type', 'annual')
    year = get_year_arg()

    remaining = leave_service.get_remaining_leave_days(employee_id, leave_type, year)
    return jsonify({
        'success': True,
        'employee_id': employee_id,
        'leave_type': leave_type,
        'year': year,
        'remaining_days': remaining
    })


@leaves_bp.route('/balance', methods=['GET'])
@login_required
def leave_balance():
    employee_id = _resolve_employee_id(request.args.get('employee_id', type=int))
    balances = leave_service.get_employee_leave_balance(employee_id, get_year_arg())
    return jsonify({'success': True, 'employee_id': employee_id, 'balances': balances})


@leaves_bp.route('/<int:request_id>/cancel', methods=['POST'])
@login_required
@require_employee_record
def cancel_leave_request(request_id):
    leave_request = leave_service.cancel_leave_request(request_id, g.current_employee)
    return jsonify({'success': True, 'leave_request': leave_request.to_dict()})


@leaves_bp.route('/<int:request_id>', methods=['GET'])
@login_required
def get_leave_request(request_id):
    leave_request = leave_service.get_leave_request_by_id(request_id)
    if not _is_reviewer():
        _resolve_employee_id(leave_request.employee_id)
    return jsonify({'success': True, 'leave_request': leave_request.to_dict(include_employee=True)})


@leaves_bp.route('/<int:request_id>', methods=['PATCH', 'PUT'])
@login_required
def update_leave_request(request_id):
    leave_request = leave_service.get_leave_request_by_id(request_id)
    if not _is_reviewer():
        _resolve_employee_id(leave_request.employee_id)

    payload = LeaveUpdateSchema.model_validate(request.get_json(silent=True) or {})
    leave_request = leave_service.update_leave_request(request_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'leave_request': leave_request.to_dict()})


# ===== Review =====

@leaves_bp.route('/pending', methods=['GET'])
@login_required
@require_role(*REVIEWER_ROLES)
def pending_leave_requests():
    requests = leave_service.get_pending_leave_requests()
    return jsonify({'success': True, 'leave_requests': [r.to_dict(include_employee=True) for r in requests]})


@leaves_bp.route('', methods=['GET'])
@login_required
@require_role(*REVIEWER_ROLES)
def list_leave_requests():
    requests = leave_service.get_all_leave_requests(
        status=request.args.get('status'),
        section_id=request.args.get('section_id', type=int)
    )
    return jsonify({'success': True, 'leave_requests': [r.to_dict(include_employee=True) for r in requests]})


@leaves_bp.route('/employee/<int:employee_id>', methods=['GET'])
@login_required
@require_role(*REVIEWER_ROLES)
def employee_leave_requests(employee_id):
    requests = leave_service.get_employee_leave_requests(employee_id, status=request.args.get('status'))
    return jsonify({'success': True, 'leave_requests': [r.to_dict() for r in requests]})


@leaves_bp.route('/<int:request_id>/approve', methods=['POST'])
@login_required
@require_role(*REVIEWER_ROLES)
def approve_leave_request(request_id):
    payload = LeaveDecisionSchema.model_validate(request.get_json(silent=True) or {})
    leave_request = leave_service.approve_leave_request(
        request_id, current_user.full_name, comments=payload.comments, approver_id=current_user.id
    )
    return jsonify({'success': True, 'leave_request': leave_request.to_dict(include_employee=True)})


@leaves_bp.route('/<int:request_id>/reject', methods=['POST'])
@login_required
@require_role(*REVIEWER_ROLES)
def reject_leave_request(request_id):
    payload = LeaveDecisionSchema.model_validate(request.get_json(silent=True) or {})
    if not payload.reason:
        return jsonify({'success': False, 'error': 'Rejection reason is required'}), 400

    leave_request = leave_service.reject_leave_request(
        request_id, current_user.full_name, reason=payload.reason, rejected_by_id=current_user.id
    )
    return jsonify({'success': True, 'leave_request': leave_request.to_dict(include_employee=True)})


# ===== Balances (admin) =====

@leaves_bp.route('/balances', methods=['POST'])
@login_required
@require_role('admin')
def create_leave_balance():
    payload = LeaveBalanceSchema.model_validate(request.get_json(silent=True) or {})
    balance = leave_service.create_leave_balance(payload.model_dump())
    return jsonify({'success': True, 'balance': balance.to_dict()}), 201


@leaves_bp.route('/balances/reset', methods=['POST'])
@login_required
@require_role('admin')
def reset_leave_balances():
    year = (request.get_json(silent=True) or {}).get('year') or date.today().year
    if not isinstance(year, int):
        abort(400, description='Year must be an integer')

    count = leave_service.reset_leave_balances(year)
    return jsonify({'success': True, 'year': year, 'reset_count': count})


# ===== Reports (admin) =====

@leaves_bp.route('/reports/summary', methods=['GET'])
@login_required
@require_role('admin')
def leave_report():
    today = date.today()
    start_date = get_date_arg('from', default=date(today.year, 1, 1))
    end_date = get_date_arg('to', default=date(today.year, 12, 31))
    if end_date < start_date:
        abort(400, description="'to' cannot be before 'from'")

    report = leave_service.get_leave_report(start_date, end_date, section_id=request.args.get('section_id', type=int))
    return jsonify({'success': True, 'report': report})


@leaves_bp.route('/reports/status-counts', methods=['GET'])
@login_required
@require_role('admin')
def status_counts():
    counts = leave_service.get_employee_status_counts(get_date_arg('date'))
    return jsonify({'success': True, 'counts': counts})


@leaves_bp.route('/reports/monthly', methods=['GET'])
@login_required
@require_role('admin')
def monthly_leave_requests():
    year = get_year_arg()
    return jsonify({'success': True, 'year': year, 'monthly': leave_service.get_monthly_leave_requests(year)})


@leaves_bp.route('/reports/utilization', methods=['GET'])
@login_required
@require_role('admin')
def leave_utilization():
    utilization = leave_service.get_employee_leave_utilization(request.args.get('timeframe', 'month'))
    return jsonify({'success': True, 'utilization': utilization})
