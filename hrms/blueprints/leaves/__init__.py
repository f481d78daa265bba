"""
Leaves Blueprint
Leave requests, approvals, balances and leave reports
"""
from flask import Blueprint

leaves_bp = Blueprint('leaves', __name__)

from hrms.blueprints.leaves import routes  # noqa: E402,F401
