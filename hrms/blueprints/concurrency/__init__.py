"""
Concurrency Blueprint
Conflict-of-interest declarations
"""
from flask import Blueprint

concurrency_bp = Blueprint('concurrency', __name__)

from hrms.blueprints.concurrency import routes  # noqa: E402,F401
