from flask import request, jsonify
from flask_login import login_required
from hrms.blueprints.payroll import payroll_bp
from hrms.schemas import (
    PayrollSchema, PayrollUpdateSchema,
    BenefitSchema, BenefitUpdateSchema, EnrollmentSchema,
)
from hrms.services.payroll_service import payroll_service
from hrms.utils.query_params import get_bool_arg
from hrms.utils.security_decorators import require_role


@payroll_bp.before_request
@login_required
@require_role('admin')
def check_access():
    """Payroll and benefits are admin only"""
    pass


# ===== Payroll =====

@payroll_bp.route('/payrolls', methods=['GET'])
def list_payrolls():
    employee_id = request.args.get('employee_id', type=int)
    if employee_id:
        payrolls = payroll_service.get_payrolls_by_employee(employee_id)
    else:
        payrolls = payroll_service.get_all_payrolls()
    return jsonify({'success': True, 'payrolls': [p.to_dict() for p in payrolls]})


@payroll_bp.route('/payrolls', methods=['POST'])
def create_payroll():
    payload = PayrollSchema.model_validate(request.get_json(silent=True) or {})
    payroll = payroll_service.create_payroll(payload.model_dump())
    return jsonify({'success': True, 'payroll': payroll.to_dict()}), 201


@payroll_bp.route('/payrolls/<int:payroll_id>', methods=['GET'])
def get_payroll(payroll_id):
    return jsonify({'success': True, 'payroll': payroll_service.get_payroll_by_id(payroll_id).to_dict()})


@payroll_bp.route('/payrolls/<int:payroll_id>', methods=['PATCH', 'PUT'])
def update_payroll(payroll_id):
    payload = PayrollUpdateSchema.model_validate(request.get_json(silent=True) or {})
    payroll = payroll_service.update_payroll(payroll_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'payroll': payroll.to_dict()})


@payroll_bp.route('/payrolls/<int:payroll_id>', methods=['DELETE'])
def delete_payroll(payroll_id):
    payroll_service.delete_payroll(payroll_id)
    return jsonify({'success': True})


# ===== Benefits =====

@payroll_bp.route('/benefits', methods=['GET'])
def list_benefits():
    benefits = payroll_service.get_all_benefits(include_inactive=get_bool_arg('include_inactive'))
    return jsonify({'success': True, 'benefits': [b.to_dict() for b in benefits]})


@payroll_bp.route('/benefits', methods=['POST'])
def create_benefit():
    payload = BenefitSchema.model_validate(request.get_json(silent=True) or {})
    benefit = payroll_service.create_benefit(payload.model_dump())
    return jsonify({'success': True, 'benefit': benefit.to_dict()}), 201


@payroll_bp.route('/benefits/<int:benefit_id>', methods=['GET'])
def get_benefit(benefit_id):
    return jsonify({'success': True, 'benefit': payroll_service.get_benefit_by_id(benefit_id).to_dict()})


@payroll_bp.route('/benefits/<int:benefit_id>', methods=['PATCH', 'PUT'])
def update_benefit(benefit_id):
    payload = BenefitUpdateSchema.model_validate(request.get_json(silent=True) or {})
    benefit = payroll_service.update_benefit(benefit_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'benefit': benefit.to_dict()})


@payroll_bp.route('/benefits/<int:benefit_id>', methods=['DELETE'])
def delete_benefit(benefit_id):
    payroll_service.delete_benefit(benefit_id)
    return jsonify({'success': True})


@payroll_bp.route('/benefits/enroll', methods=['POST'])
def enroll_in_benefit():
    payload = EnrollmentSchema.model_validate(request.get_json(silent=True) or {})
    enrollment = payroll_service.enroll_employee_in_benefit(payload.employee_id, payload.benefit_id)
    return jsonify({'success': True, 'enrollment': enrollment.to_dict()}), 201


@payroll_bp.route('/employees/<int:employee_id>/benefits', methods=['GET'])
def employee_benefits(employee_id):
    enrollments = payroll_service.get_employee_benefits(employee_id)
    return jsonify({'success': True, 'benefits': [e.to_dict() for e in enrollments]})
