"""
Auth Blueprint
Sign-up, login, email verification and password reset
"""
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from hrms.blueprints.auth import routes  # noqa: E402,F401
