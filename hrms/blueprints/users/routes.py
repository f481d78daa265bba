from flask import request, jsonify
from flask_login import login_required, current_user
from hrms.blueprints.users import users_bp
from hrms.schemas import UserCreateSchema, UserUpdateSchema
from hrms.services.user_service import user_service
from hrms.utils.security_decorators import require_role


@users_bp.before_request
@login_required
@require_role('admin')
def check_access():
    """All account administration is admin only"""
    pass


@users_bp.route('', methods=['GET'])
def list_users():
    query = request.args.get('q')
    if query:
        users = user_service.search_users(query, request.args.get('field', 'name'))
    else:
        users = user_service.get_all_users()
    return jsonify({'success': True, 'users': [u.to_dict() for u in users]})


@users_bp.route('', methods=['POST'])
def create_user():
    payload = UserCreateSchema.model_validate(request.get_json(silent=True) or {})
    user = user_service.create_user(payload.model_dump())
    return jsonify({'success': True, 'user': user.to_dict()}), 201


@users_bp.route('/audit-log', methods=['GET'])
def audit_log():
    entries = user_service.get_audit_log(
        event_type=request.args.get('event_type'),
        user_id=request.args.get('user_id', type=int),
        limit=request.args.get('limit', 100, type=int)
    )
    return jsonify({'success': True, 'entries': [e.to_dict() for e in entries]})


@users_bp.route('/by-email', methods=['GET'])
def get_user_by_email():
    user = user_service.get_user_by_email(request.args.get('email'))
    if not user:
        return jsonify({'success': False, 'error': 'User not found'}), 404
    return jsonify({'success': True, 'user': user.to_dict()})


@users_bp.route('/<int:user_id>', methods=['GET'])
def get_user(user_id):
    user = user_service.get_user_by_id(user_id)
    return jsonify({'success': True, 'user': user.to_dict()})


@users_bp.route('/<int:user_id>/role', methods=['GET'])
def get_user_role(user_id):
    return jsonify({'success': True, 'role': user_service.get_user_role(user_id)})


@users_bp.route('/<int:user_id>', methods=['PATCH', 'PUT'])
def update_user(user_id):
    payload = UserUpdateSchema.model_validate(request.get_json(silent=True) or {})
    user = user_service.update_user(user_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'user': user.to_dict()})


@users_bp.route('/<int:user_id>', methods=['DELETE'])
def delete_user(user_id):
    user_service.delete_user(user_id, current_user)
    return jsonify({'success': True})
