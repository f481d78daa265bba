"""
Security decorators for access control
"""
from functools import wraps
from flask import g, abort
from flask_login import current_user


def require_role(*allowed_roles):
    """
    Decorator to ensure the user has one of the given roles
    Usage: @require_role('admin', 'manager')
    Must be used after @login_required
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401, description="Authentication required")

            if not current_user.has_role(*allowed_roles):
                abort(403, description=f"This action requires {' or '.join(allowed_roles)} role")

            return f(*args, **kwargs)

        return decorated_function

    return decorator


def require_employee_record(f):
    """
    Decorator to ensure the current user is linked to an active employee record
    The record is exposed as g.current_employee
    Must be used after @login_required
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from hrms.models.employee import Employee

        employee = Employee.query.filter_by(user_id=current_user.id, is_active=True).first()
        if not employee:
            abort(404, description="No employee record is linked to your account")

        g.current_employee = employee
        return f(*args, **kwargs)

    return decorated_function
