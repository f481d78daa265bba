from flask import request, jsonify, g
from flask_login import login_required, current_user
from hrms.blueprints.employees import employees_bp
from hrms.schemas import (
    EmployeeSchema, EmployeeUpdateSchema, TerminationSchema, LinkUserSchema,
    EmployeeDetailsSchema, DETAIL_SECTION_SCHEMAS, ActivitySchema,
)
from hrms.services.employee_service import employee_service
from hrms.services.activity_service import activity_service
from hrms.services.errors import NotFoundError
from hrms.utils.query_params import get_bool_arg
from hrms.utils.security_decorators import require_role, require_employee_record


# ===== Self service =====

@employees_bp.route('/me', methods=['GET'])
@login_required
@require_employee_record
def my_record():
    """The caller's own employee record"""
    return jsonify({'success': True, 'employee': g.current_employee.to_dict()})


@employees_bp.route('/me/profile', methods=['GET'])
@login_required
@require_employee_record
def my_profile():
    profile = employee_service.get_complete_employee_profile(g.current_employee.id)
    return jsonify({'success': True, 'profile': profile})


# ===== Employee records =====

@employees_bp.route('', methods=['GET'])
@login_required
@require_role('admin')
def list_employees():
    """
    List employees

    Query params:
        q: free text over name, email and employment number
        section_id, status: filters
        include_inactive: include soft-deleted records
    """
    query = request.args.get('q')
    section_id = request.args.get('section_id', type=int)
    status = request.args.get('status')

    if query or section_id or status:
        employees = employee_service.search_employees(query=query, section_id=section_id, status=status)
    else:
        employees = employee_service.get_all_employees(include_inactive=get_bool_arg('include_inactive'))

    return jsonify({'success': True, 'employees': [e.to_dict() for e in employees]})


@employees_bp.route('', methods=['POST'])
@login_required
@require_role('admin')
def create_employee():
    payload = EmployeeSchema.model_validate(request.get_json(silent=True) or {})
    employee = employee_service.create_employee(payload.model_dump())
    return jsonify({'success': True, 'employee': employee.to_dict()}), 201


@employees_bp.route('/by-user/<int:user_id>', methods=['GET'])
@login_required
@require_role('admin')
def get_employee_by_user(user_id):
    employee = employee_service.get_employee_by_user_id(user_id)
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('/by-section/<int:section_id>', methods=['GET'])
@login_required
@require_role('admin')
def list_section_employees(section_id):
    employees = employee_service.get_employees_by_section(section_id)
    return jsonify({'success': True, 'employees': [e.to_dict() for e in employees]})


@employees_bp.route('/<int:employee_id>', methods=['GET'])
@login_required
@require_role('admin')
def get_employee(employee_id):
    employee = employee_service.get_employee_by_id(employee_id, include_inactive=get_bool_arg('include_inactive'))
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('/<int:employee_id>', methods=['PATCH', 'PUT'])
@login_required
@require_role('admin')
def update_employee(employee_id):
    payload = EmployeeUpdateSchema.model_validate(request.get_json(silent=True) or {})
    employee = employee_service.update_employee(employee_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('/<int:employee_id>', methods=['DELETE'])
@login_required
@require_role('admin')
def delete_employee(employee_id):
    employee_service.delete_employee(employee_id)
    return jsonify({'success': True})


@employees_bp.route('/<int:employee_id>/terminate', methods=['POST'])
@login_required
@require_role('admin')
def terminate_employee(employee_id):
    payload = TerminationSchema.model_validate(request.get_json(silent=True) or {})
    employee = employee_service.terminate_employee(employee_id, payload.model_dump(), terminated_by=current_user)
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('/<int:employee_id>/link-user', methods=['POST'])
@login_required
@require_role('admin')
def link_user(employee_id):
    payload = LinkUserSchema.model_validate(request.get_json(silent=True) or {})
    employee = employee_service.link_employee_with_user(employee_id, payload.user_id)
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('/<int:employee_id>/profile', methods=['GET'])
@login_required
@require_role('admin')
def get_profile(employee_id):
    profile = employee_service.get_complete_employee_profile(employee_id)
    return jsonify({'success': True, 'profile': profile})


# ===== Details =====

@employees_bp.route('/details', methods=['GET'])
@login_required
@require_role('admin')
def list_employee_details():
    details = employee_service.get_all_employee_details()
    return jsonify({'success': True, 'details': [d.to_dict() for d in details]})


@employees_bp.route('/<int:employee_id>/details', methods=['POST'])
@login_required
@require_role('admin')
def create_employee_details(employee_id):
    payload = EmployeeDetailsSchema.model_validate(request.get_json(silent=True) or {})
    details = employee_service.create_employee_details(employee_id, payload.model_dump(exclude_none=True))
    return jsonify({'success': True, 'details': details.to_dict()}), 201


@employees_bp.route('/<int:employee_id>/details', methods=['GET'])
@login_required
@require_role('admin')
def get_employee_details(employee_id):
    details = employee_service.get_employee_details_by_id(employee_id)
    return jsonify({'success': True, 'details': details.to_dict()})


@employees_bp.route('/<int:employee_id>/details', methods=['PATCH', 'PUT'])
@login_required
@require_role('admin')
def update_employee_details(employee_id):
    payload = EmployeeDetailsSchema.model_validate(request.get_json(silent=True) or {})
    details = employee_service.update_employee_details(employee_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'details': details.to_dict()})


@employees_bp.route('/<int:employee_id>/details/<section>', methods=['PATCH', 'PUT'])
@login_required
@require_role('admin')
def update_detail_section(employee_id, section):
    """Update one section: address, emergency_contact, banking_info or additional_info"""
    schema = DETAIL_SECTION_SCHEMAS.get(section)
    if schema is None:
        raise NotFoundError(f'Unknown details section: {section}')

    payload = schema.model_validate(request.get_json(silent=True) or {})
    details = employee_service.update_detail_section(employee_id, section, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'details': details.to_dict()})


@employees_bp.route('/<int:employee_id>/details', methods=['DELETE'])
@login_required
@require_role('admin')
def delete_employee_details(employee_id):
    employee_service.delete_employee_details(employee_id)
    return jsonify({'success': True})


# ===== Activities =====

@employees_bp.route('/<int:employee_id>/activities', methods=['GET'])
@login_required
@require_role('admin')
def list_activities(employee_id):
    employee_service.get_employee_by_id(employee_id, include_inactive=True)
    activities = activity_service.get_employee_activities(employee_id)
    return jsonify({'success': True, 'activities': [a.to_dict() for a in activities]})


@employees_bp.route('/<int:employee_id>/activities', methods=['POST'])
@login_required
@require_role('admin')
def add_activity(employee_id):
    payload = ActivitySchema.model_validate(request.get_json(silent=True) or {})
    activity = activity_service.add_employee_activity(
        employee_id, payload.type, payload.description, when=payload.date
    )
    return jsonify({'success': True, 'activity': activity.to_dict()}), 201


@employees_bp.route('/activities/<int:activity_id>', methods=['DELETE'])
@login_required
@require_role('admin')
def delete_activity(activity_id):
    activity_service.delete_employee_activity(activity_id)
    return jsonify({'success': True})
