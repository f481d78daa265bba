"""
Users Blueprint
Account administration (admin only)
"""
from flask import Blueprint

users_bp = Blueprint('users', __name__)

from hrms.blueprints.users import routes  # noqa: E402,F401
