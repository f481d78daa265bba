"""
Audit Log Model
Tracks security-sensitive events and HR decisions for compliance
"""
from datetime import datetime, timedelta
from hrms import db
import json


INVALID_CREDENTIALS = 'Invalid credentials'


class AuditLog(db.Model):
    """Audit log for security events and compliance tracking"""
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)

    # Event information
    event_type = db.Column(db.String(50), nullable=False, index=True)  # e.g., 'login_attempt', 'leave_approved'
    event_status = db.Column(db.String(20), nullable=False, default='success')  # 'success', 'failure', 'denied'

    # Actor information
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)

    # Resource information
    resource_type = db.Column(db.String(50), nullable=True)  # 'leave_request', 'concurrency_form', 'employee'
    resource_id = db.Column(db.Integer, nullable=True, index=True)

    # Request context
    ip_address = db.Column(db.String(45), nullable=True)  # IPv4 or IPv6
    user_agent = db.Column(db.String(500), nullable=True)

    # Event details (JSON)
    details = db.Column(db.Text, nullable=True)

    # Error information (for failures)
    error_message = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = db.relationship('User', foreign_keys=[user_id])

    def __repr__(self):
        return f'<AuditLog {self.event_type} - {self.created_at}>'

    def get_details(self):
        """Parse and return details as dict"""
        if self.details:
            try:
                return json.loads(self.details)
            except json.JSONDecodeError:
                return {}
        return {}

    def set_details(self, details_dict):
        """Set details from dict"""
        if details_dict:
            self.details = json.dumps(details_dict, default=str)

    @staticmethod
    def log_event(event_type, user_id=None, resource_type=None, resource_id=None,
                  status='success', details=None, ip_address=None):
        """
        Record an HR event (leave decision, document upload, termination...)

        The caller owns the transaction; the entry is added to the session only.
        """
        log = AuditLog(
            event_type=event_type,
            event_status=status,
            user_id=user_id,
            resource_type=resource_type,
            resource_id=resource_id,
            ip_address=ip_address
        )
        log.set_details(details)
        db.session.add(log)
        return log

    @staticmethod
    def log_login_attempt(email, success=True, ip_address=None, user_agent=None, error_message=None):
        """
        Log login attempt (successful or failed)

        Args:
            email: Email address used in login attempt
            success: Whether login was successful
            ip_address: IP address of request
            user_agent: User agent string
            error_message: Error message if login failed
        """
        from hrms.models.user import User
        user = User.query.filter_by(email=email).first()

        log = AuditLog(
            event_type='login_attempt',
            event_status='success' if success else 'failure',
            user_id=user.id if user else None,
            ip_address=ip_address,
            user_agent=user_agent,
            error_message=error_message
        )

        details = {'email': email}
        if not user:
            details['reason'] = 'User not found'
        log.set_details(details)

        db.session.add(log)
        db.session.commit()
        return log

    @staticmethod
    def get_failed_login_attempts(user_id, minutes=15):
        """Count wrong-password attempts for a user in the last N minutes"""
        threshold = datetime.utcnow() - timedelta(minutes=minutes)

        return AuditLog.query.filter(
            AuditLog.user_id == user_id,
            AuditLog.event_type == 'login_attempt',
            AuditLog.event_status == 'failure',
            AuditLog.error_message == INVALID_CREDENTIALS,
            AuditLog.created_at >= threshold
        ).count()

    @staticmethod
    def should_lock_account(user_id, threshold=5, window_minutes=15):
        """Check if account should be locked based on failed login attempts"""
        failed_attempts = AuditLog.get_failed_login_attempts(user_id, window_minutes)
        return failed_attempts >= threshold

    def to_dict(self):
        return {
            'id': self.id,
            'event_type': self.event_type,
            'event_status': self.event_status,
            'user_id': self.user_id,
            'resource_type': self.resource_type,
            'resource_id': self.resource_id,
            'details': self.get_details(),
            'error_message': self.error_message,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
