"""
Employees Blueprint
Employee records, details, activities and profiles
"""
from flask import Blueprint

employees_bp = Blueprint('employees', __name__)

from hrms.blueprints.employees import routes  # noqa: E402,F401
