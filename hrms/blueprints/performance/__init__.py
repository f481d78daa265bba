"""
Performance Blueprint
"""
from flask import Blueprint

performance_bp = Blueprint('performance', __name__)

from hrms.blueprints.performance import routes  # noqa: E402,F401
