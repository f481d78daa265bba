import secrets
from datetime import datetime, timedelta
from flask_login import UserMixin
from hrms import db, bcrypt, login_manager


ROLES = ('admin', 'manager', 'employee')


@login_manager.user_loader
def load_user(user_id):
    """Load user by ID for Flask-Login"""
    return db.session.get(User, int(user_id))


class User(UserMixin, db.Model):
    """User model for authentication and account administration"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile information
    first_name = db.Column(db.String(80))
    last_name = db.Column(db.String(80))
    phone_number = db.Column(db.String(50))
    role = db.Column(db.String(20), nullable=False, default='employee', index=True)

    # Status
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    email_verified_at = db.Column(db.DateTime)
    locked_until = db.Column(db.DateTime)
    last_login_at = db.Column(db.DateTime)

    # One-time tokens
    verification_token = db.Column(db.String(100), unique=True, index=True)
    verification_token_expires = db.Column(db.DateTime)
    reset_token = db.Column(db.String(100), unique=True, index=True)
    reset_token_expires = db.Column(db.DateTime)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<User {self.email}>'

    def set_password(self, password):
        """Hash and set the user's password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches the hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def full_name(self):
        """Get user's full name"""
        if self.first_name and self.last_name:
            return f'{self.first_name} {self.last_name}'
        if self.first_name:
            return self.first_name
        return self.email.split('@')[0]  # Use email prefix as display name

    @property
    def email_verified(self):
        return self.email_verified_at is not None

    def has_role(self, *roles):
        return self.role in roles

    # ===== Account lockout =====

    def is_account_locked(self):
        """Check whether the account is inside a lockout window"""
        return self.locked_until is not None and self.locked_until > datetime.utcnow()

    def lock_account(self, minutes=30):
        self.locked_until = datetime.utcnow() + timedelta(minutes=minutes)

    def unlock_account(self):
        self.locked_until = None

    # ===== Email verification =====

    def generate_verification_token(self, hours=24):
        """Create a fresh email verification token"""
        self.verification_token = secrets.token_urlsafe(32)
        self.verification_token_expires = datetime.utcnow() + timedelta(hours=hours)
        return self.verification_token

    @staticmethod
    def find_by_verification_token(token):
        if not token:
            return None
        return User.query.filter_by(verification_token=token).first()

    def confirm_email(self, token):
        """
        Confirm the email address

        Returns:
            True if the token matched and had not expired
        """
        if not token or token != self.verification_token:
            return False
        if not self.verification_token_expires or self.verification_token_expires < datetime.utcnow():
            return False

        self.email_verified_at = datetime.utcnow()
        self.verification_token = None
        self.verification_token_expires = None
        return True

    # ===== Password reset =====

    def generate_password_reset_token(self, hours=1):
        self.reset_token = secrets.token_urlsafe(32)
        self.reset_token_expires = datetime.utcnow() + timedelta(hours=hours)
        return self.reset_token

    @staticmethod
    def find_by_reset_token(token):
        if not token:
            return None
        return User.query.filter_by(reset_token=token).first()

    def reset_password(self, token, new_password):
        """Set a new password if the reset token is valid; consumes the token"""
        if not token or token != self.reset_token:
            return False
        if not self.reset_token_expires or self.reset_token_expires < datetime.utcnow():
            return False

        self.set_password(new_password)
        self.reset_token = None
        self.reset_token_expires = None
        self.unlock_account()
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'phone_number': self.phone_number,
            'role': self.role,
            'is_active': self.is_active,
            'email_verified': self.email_verified,
            'last_login_at': self.last_login_at.isoformat() if self.last_login_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
