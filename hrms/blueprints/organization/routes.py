from flask import request, jsonify
from flask_login import login_required
from hrms.blueprints.organization import organization_bp
from hrms.schemas import (
    MinistrySchema, MinistryUpdateSchema,
    SectionSchema, SectionUpdateSchema,
    PositionSchema, PositionUpdateSchema,
)
from hrms.services.organization_service import organization_service
from hrms.utils.query_params import get_bool_arg
from hrms.utils.security_decorators import require_role


@organization_bp.before_request
@login_required
@require_role('admin')
def check_access():
    """Organisation structure is managed by admins"""
    pass


# ===== Ministries =====

@organization_bp.route('/ministries', methods=['GET'])
def list_ministries():
    ministries = organization_service.get_all_ministries()
    return jsonify({'success': True, 'ministries': [m.to_dict() for m in ministries]})


@organization_bp.route('/ministries', methods=['POST'])
def create_ministry():
    payload = MinistrySchema.model_validate(request.get_json(silent=True) or {})
    ministry = organization_service.create_ministry(payload.model_dump())
    return jsonify({'success': True, 'ministry': ministry.to_dict()}), 201


@organization_bp.route('/ministries/<int:ministry_id>', methods=['GET'])
def get_ministry(ministry_id):
    ministry = organization_service.get_ministry_by_id(ministry_id)
    data = ministry.to_dict()
    data['sections'] = [s.to_dict() for s in ministry.sections.filter_by(is_active=True).all()]
    return jsonify({'success': True, 'ministry': data})


@organization_bp.route('/ministries/<int:ministry_id>', methods=['PATCH', 'PUT'])
def update_ministry(ministry_id):
    payload = MinistryUpdateSchema.model_validate(request.get_json(silent=True) or {})
    ministry = organization_service.update_ministry(ministry_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'ministry': ministry.to_dict()})


@organization_bp.route('/ministries/<int:ministry_id>', methods=['DELETE'])
def delete_ministry(ministry_id):
    organization_service.delete_ministry(ministry_id)
    return jsonify({'success': True})


# ===== Sections =====

@organization_bp.route('/sections', methods=['GET'])
def list_sections():
    sections = organization_service.get_all_sections(include_inactive=get_bool_arg('include_inactive'))
    return jsonify({'success': True, 'sections': [s.to_dict() for s in sections]})


@organization_bp.route('/sections', methods=['POST'])
def create_section():
    payload = SectionSchema.model_validate(request.get_json(silent=True) or {})
    section = organization_service.create_section(payload.model_dump())
    return jsonify({'success': True, 'section': section.to_dict()}), 201


@organization_bp.route('/sections/<int:section_id>', methods=['GET'])
def get_section(section_id):
    """Section with its active employees and positions"""
    return jsonify({'success': True, 'section': organization_service.get_section_with_employees(section_id)})


@organization_bp.route('/sections/<int:section_id>', methods=['PATCH', 'PUT'])
def update_section(section_id):
    payload = SectionUpdateSchema.model_validate(request.get_json(silent=True) or {})
    section = organization_service.update_section(section_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'section': section.to_dict()})


@organization_bp.route('/sections/<int:section_id>', methods=['DELETE'])
def delete_section(section_id):
    organization_service.delete_section(section_id)
    return jsonify({'success': True})


@organization_bp.route('/sections/<int:section_id>/employee-count', methods=['POST'])
def refresh_section_employee_count(section_id):
    count = organization_service.update_section_employee_count(section_id)
    return jsonify({'success': True, 'employee_count': count})


# ===== Positions =====

@organization_bp.route('/positions', methods=['GET'])
def list_positions():
    positions = organization_service.get_all_positions(
        include_inactive=get_bool_arg('include_inactive'),
        section_id=request.args.get('section_id', type=int)
    )
    return jsonify({'success': True, 'positions': [p.to_dict() for p in positions]})


@organization_bp.route('/positions', methods=['POST'])
def create_position():
    payload = PositionSchema.model_validate(request.get_json(silent=True) or {})
    position = organization_service.create_position(payload.model_dump())
    return jsonify({'success': True, 'position': position.to_dict()}), 201


@organization_bp.route('/positions/<int:position_id>', methods=['GET'])
def get_position(position_id):
    return jsonify({'success': True, 'position': organization_service.get_position_with_section(position_id)})


@organization_bp.route('/positions/<int:position_id>', methods=['PATCH', 'PUT'])
def update_position(position_id):
    payload = PositionUpdateSchema.model_validate(request.get_json(silent=True) or {})
    position = organization_service.update_position(position_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'position': position.to_dict()})


@organization_bp.route('/positions/<int:position_id>/section', methods=['PUT'])
def move_position(position_id):
    section_id = (request.get_json(silent=True) or {}).get('section_id')
    if not isinstance(section_id, int):
        return jsonify({'success': False, 'error': 'section_id is required'}), 400

    position = organization_service.update_position_section(position_id, section_id)
    return jsonify({'success': True, 'position': position.to_dict()})


@organization_bp.route('/positions/<int:position_id>', methods=['DELETE'])
def delete_position(position_id):
    organization_service.delete_position(position_id)
    return jsonify({'success': True})
