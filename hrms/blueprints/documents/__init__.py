"""
Documents Blueprint
Employee document bundles
"""
from flask import Blueprint

documents_bp = Blueprint('documents', __name__)

from hrms.blueprints.documents import routes  # noqa: E402,F401
