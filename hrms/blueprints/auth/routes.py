from flask import request, jsonify, session
from flask_login import login_user, logout_user, current_user, login_required
from flask_wtf.csrf import generate_csrf
from hrms import limiter
from hrms.blueprints.auth import auth_bp
from hrms.blueprints.auth.forms import LoginForm
from hrms.schemas import SignUpSchema, PasswordResetSchema, NewPasswordSchema
from hrms.services.auth_service import auth_service


@auth_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    """Token for the X-CSRFToken header on state-changing requests"""
    return jsonify({'success': True, 'csrf_token': generate_csrf()})


@auth_bp.route('/signup', methods=['POST'])
@limiter.limit("5 per hour")
def signup():
    payload = SignUpSchema.model_validate(request.get_json(silent=True) or {})
    user, email_sent = auth_service.signup(payload.model_dump())

    return jsonify({
        'success': True,
        'message': 'Confirmation email sent' if email_sent else 'Account created. Verification email could not be sent.',
        'user': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute")
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        details = [{'field': field, 'message': messages[0]} for field, messages in form.errors.items()]
        return jsonify({'success': False, 'error': 'Validation error', 'details': details}), 400

    user = auth_service.authenticate(
        form.email.data,
        form.password.data,
        ip_address=request.remote_addr,
        user_agent=request.headers.get('User-Agent')
    )

    # Regenerate session to prevent session fixation
    session.clear()
    session.permanent = True
    login_user(user, remember=form.remember_me.data)

    return jsonify({'success': True, 'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    session.clear()
    return jsonify({'success': True})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    data = current_user.to_dict()
    employee = current_user.employee_record
    data['employee_id'] = employee.id if employee and employee.is_active else None
    return jsonify({'success': True, 'user': data})


@auth_bp.route('/verify-email', methods=['POST'])
def verify_email():
    token = (request.get_json(silent=True) or {}).get('token') or request.args.get('token')
    if not token:
        return jsonify({'success': False, 'error': 'Token is required'}), 400

    auth_service.verify_email(token)
    return jsonify({'success': True, 'message': 'Email verified'})


@auth_bp.route('/reset-password', methods=['POST'])
@limiter.limit("5 per hour")
def reset_password():
    payload = PasswordResetSchema.model_validate(request.get_json(silent=True) or {})
    auth_service.request_password_reset(payload.email)

    # Same answer whether or not the account exists
    return jsonify({
        'success': True,
        'message': 'If an account exists for that email, a reset link has been sent.'
    })


@auth_bp.route('/new-password', methods=['POST'])
@limiter.limit("10 per hour")
def new_password():
    payload = NewPasswordSchema.model_validate(request.get_json(silent=True) or {})
    auth_service.set_new_password(payload.token, payload.password)
    return jsonify({'success': True, 'message': 'Password updated'})
