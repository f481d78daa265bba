"""
Organization Blueprint
Ministries, sections and positions
"""
from flask import Blueprint

organization_bp = Blueprint('organization', __name__)

from hrms.blueprints.organization import routes  # noqa: E402,F401
