"""
Attendance Blueprint
Clock-in/out, time entries and attendance reports
"""
from flask import Blueprint

attendance_bp = Blueprint('attendance', __name__)

from hrms.blueprints.attendance import routes  # noqa: E402,F401
