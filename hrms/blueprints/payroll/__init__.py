"""
Payroll Blueprint
Payroll records and benefits (admin only)
"""
from flask import Blueprint

payroll_bp = Blueprint('payroll', __name__)

from hrms.blueprints.payroll import routes  # noqa: E402,F401
