"""
Recruitment Blueprint
Job postings, candidates and interviews (admin only)
"""
from flask import Blueprint

recruitment_bp = Blueprint('recruitment', __name__)

from hrms.blueprints.recruitment import routes  # noqa: E402,F401
