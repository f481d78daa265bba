"""
Auth Service
Sign-up, credential checks with lockout, email verification and password reset
"""
from datetime import datetime
from flask import current_app
from hrms import db
from hrms.models.user import User
from hrms.models.audit_log import AuditLog, INVALID_CREDENTIALS
from hrms.services.errors import ServiceError, PermissionDenied
from hrms.services.user_service import user_service
from hrms.services.email_service import email_service
from hrms.utils.input_validators import validate_password_strength


class AuthenticationError(ServiceError):
    status_code = 401


class AuthService:
    """Account lifecycle and login checks"""

    def signup(self, data):
        """
        Register a new account and send the verification email

        Returns:
            (user, email_sent)
        """
        user = user_service.create_user({**data, 'email_verified': False})

        token = user.generate_verification_token(current_app.config.get('VERIFICATION_TOKEN_HOURS', 24))
        db.session.commit()

        email_sent = email_service.send_verification_email(user, token)
        return user, email_sent

    def authenticate(self, email, password, ip_address=None, user_agent=None):
        """
        Check credentials and account state

        Returns:
            The authenticated User

        Raises:
            AuthenticationError: Wrong email or password
            PermissionDenied: Locked, deactivated or unverified account
        """
        email = (email or '').strip().lower()
        user = user_service.get_user_by_email(email)

        if user and user.is_account_locked():
            error_message = 'Account temporarily locked due to multiple failed login attempts'
            AuditLog.log_login_attempt(email, success=False, ip_address=ip_address,
                                       user_agent=user_agent, error_message=error_message)
            raise PermissionDenied('Your account has been temporarily locked due to multiple failed '
                                   'login attempts. Please try again later or reset your password.')

        if not user or not user.check_password(password):
            AuditLog.log_login_attempt(email, success=False, ip_address=ip_address,
                                       user_agent=user_agent, error_message=INVALID_CREDENTIALS)

            # Check if account should be locked after this failed attempt
            if user and AuditLog.should_lock_account(
                    user.id,
                    threshold=current_app.config.get('LOCKOUT_THRESHOLD', 5),
                    window_minutes=current_app.config.get('LOCKOUT_WINDOW_MINUTES', 15)):
                user.lock_account(current_app.config.get('LOCKOUT_DURATION_MINUTES', 30))
                db.session.commit()
                current_app.logger.warning(f'Account {user.id} locked after repeated failed logins from {ip_address}')
                raise PermissionDenied('Too many failed login attempts. Your account has been temporarily '
                                       'locked for security.')

            raise AuthenticationError('Invalid email or password')

        if not user.is_active:
            AuditLog.log_login_attempt(email, success=False, ip_address=ip_address,
                                       user_agent=user_agent, error_message='Account deactivated')
            raise PermissionDenied('Your account has been deactivated. Please contact HR.')

        if not user.email_verified:
            AuditLog.log_login_attempt(email, success=False, ip_address=ip_address,
                                       user_agent=user_agent, error_message='Email not verified')
            raise PermissionDenied('Please verify your email address before signing in')

        AuditLog.log_login_attempt(email, success=True, ip_address=ip_address, user_agent=user_agent)
        user.last_login_at = datetime.utcnow()
        db.session.commit()
        return user

    def verify_email(self, token):
        user = User.find_by_verification_token(token)
        if not user or not user.confirm_email(token):
            raise ServiceError('Invalid or expired verification token')

        db.session.commit()
        current_app.logger.info(f'User {user.id} verified email')
        return user

    def request_password_reset(self, email):
        """
        Issue a reset token if the account exists

        Always succeeds so that callers cannot probe for registered emails.
        """
        user = user_service.get_user_by_email(email)
        if not user or not user.is_active:
            current_app.logger.info('Password reset requested for unknown or inactive account')
            return False

        token = user.generate_password_reset_token(current_app.config.get('PASSWORD_RESET_TOKEN_HOURS', 1))
        db.session.commit()
        return email_service.send_password_reset_email(user, token)

    def set_new_password(self, token, password):
        is_valid, error = validate_password_strength(password)
        if not is_valid:
            raise ServiceError(error)

        user = User.find_by_reset_token(token)
        if not user or not user.reset_password(token, password):
            raise ServiceError('Invalid or expired reset token')

        db.session.commit()
        current_app.logger.info(f'User {user.id} reset password')
        return user


# Singleton instance
auth_service = AuthService()
