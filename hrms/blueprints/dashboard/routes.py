from flask import jsonify, g
from flask_login import login_required, current_user
from hrms.blueprints.dashboard import dashboard_bp
from hrms.services.dashboard_service import dashboard_service
from hrms.utils.query_params import get_date_arg
from hrms.utils.security_decorators import require_role, require_employee_record


@dashboard_bp.route('/stats', methods=['GET'])
@login_required
@require_role('admin', 'manager')
def hr_stats():
    """Organisation-wide HR overview"""
    return jsonify({'success': True, 'stats': dashboard_service.get_hr_stats(get_date_arg('date'))})


@dashboard_bp.route('/me', methods=['GET'])
@login_required
@require_employee_record
def my_dashboard():
    dashboard = dashboard_service.get_employee_dashboard(g.current_employee)
    dashboard['user'] = current_user.to_dict()
    return jsonify({'success': True, 'dashboard': dashboard})
