from datetime import date
from flask import request, jsonify, g, abort
from flask_login import login_required
from hrms.blueprints.attendance import attendance_bp
from hrms import limiter
from hrms.schemas import AttendanceSchema, AttendanceUpdateSchema
from hrms.services.attendance_service import attendance_service
from hrms.utils.query_params import get_date_arg, get_year_arg
from hrms.utils.security_decorators import require_role, require_employee_record


# ===== Clock in / out =====

@attendance_bp.route('/clock-in', methods=['POST'])
@login_required
@require_employee_record
@limiter.limit("10 per minute")
def clock_in():
    entry = attendance_service.clock_in(g.current_employee)
    return jsonify({'success': True, 'entry': entry.to_dict()}), 201


@attendance_bp.route('/clock-out', methods=['POST'])
@login_required
@require_employee_record
@limiter.limit("10 per minute")
def clock_out():
    entry = attendance_service.clock_out(g.current_employee)
    return jsonify({'success': True, 'entry': entry.to_dict()})


@attendance_bp.route('/me', methods=['GET'])
@login_required
@require_employee_record
def my_entries():
    """Own time entries, newest first; ?date= narrows to a single day"""
    entries = attendance_service.get_employee_time_entries(g.current_employee.id, on_date=get_date_arg('date'))
    today = attendance_service.get_today_entry(g.current_employee)
    return jsonify({
        'success': True,
        'today': today.to_dict() if today else None,
        'entries': [e.to_dict() for e in entries]
    })


# ===== Time entries (admin) =====

@attendance_bp.route('', methods=['POST'])
@login_required
@require_role('admin')
def create_entry():
    payload = AttendanceSchema.model_validate(request.get_json(silent=True) or {})
    entry = attendance_service.create_time_entry(payload.model_dump())
    return jsonify({'success': True, 'entry': entry.to_dict()}), 201


@attendance_bp.route('/<int:entry_id>', methods=['GET'])
@login_required
@require_role('admin')
def get_entry(entry_id):
    entry = attendance_service.get_time_entry_by_id(entry_id)
    return jsonify({'success': True, 'entry': entry.to_dict()})


@attendance_bp.route('/employee/<int:employee_id>', methods=['GET'])
@login_required
@require_role('admin')
def employee_entries(employee_id):
    entries = attendance_service.get_employee_time_entries(employee_id, on_date=get_date_arg('date'))
    return jsonify({'success': True, 'entries': [e.to_dict() for e in entries]})


@attendance_bp.route('/<int:entry_id>', methods=['PATCH', 'PUT'])
@login_required
@require_role('admin')
def update_entry(entry_id):
    payload = AttendanceUpdateSchema.model_validate(request.get_json(silent=True) or {})
    entry = attendance_service.update_time_entry(entry_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'entry': entry.to_dict()})


@attendance_bp.route('/<int:entry_id>', methods=['DELETE'])
@login_required
@require_role('admin')
def delete_entry(entry_id):
    attendance_service.delete_time_entry(entry_id)
    return jsonify({'success': True})


# ===== Reports (admin) =====

@attendance_bp.route('/reports/daily', methods=['GET'])
@login_required
@require_role('admin')
def daily_report():
    report_date = get_date_arg('date', default=date.today())
    rows = attendance_service.get_daily_attendance_report(report_date)
    return jsonify({'success': True, 'date': report_date.isoformat(), 'report': rows})


@attendance_bp.route('/reports/monthly', methods=['GET'])
@login_required
@require_role('admin')
def monthly_summary():
    year = get_year_arg()
    month = request.args.get('month', type=int) or date.today().month
    if not 1 <= month <= 12:
        abort(400, description='Month must be between 1 and 12')

    rows = attendance_service.get_monthly_attendance_summary(
        year, month, section_id=request.args.get('section_id', type=int)
    )
    return jsonify({'success': True, 'year': year, 'month': month, 'summary': rows})


@attendance_bp.route('/reports/absenteeism', methods=['GET'])
@login_required
@require_role('admin')
def absenteeism_trends():
    year = get_year_arg()
    return jsonify({'success': True, 'year': year, 'trends': attendance_service.get_absenteeism_trends(year)})


@attendance_bp.route('/reports/time-tracking', methods=['GET'])
@login_required
@require_role('admin')
def time_tracking():
    start_date = get_date_arg('from', required=True)
    end_date = get_date_arg('to', required=True)
    if end_date < start_date:
        abort(400, description="'to' cannot be before 'from'")

    rows = attendance_service.get_time_tracking_summary(start_date, end_date)
    return jsonify({'success': True, 'summary': rows})
