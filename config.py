import os
import secrets
from datetime import timedelta


class Config:
    """Base configuration"""
    # Generate a temporary key for development if not set
    _secret = os.environ.get('SECRET_KEY')
    if not _secret:
        _secret = secrets.token_hex(32)
        print("WARNING: Using auto-generated SECRET_KEY. Set SECRET_KEY environment variable for production.")
    SECRET_KEY = _secret

    # Database - Handle Heroku's postgres:// -> postgresql:// conversion
    database_url = os.environ.get('DATABASE_URL') or 'postgresql://localhost/hrms'
    if database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)
    SQLALCHEMY_DATABASE_URI = database_url
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Database Connection Pool Configuration
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'max_overflow': 20,
        'pool_pre_ping': True,     # Test connection health before using
        'pool_recycle': 300,       # Recycle connections after 5 minutes
        'pool_timeout': 30,
    }

    # Session
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Error Tracking
    SENTRY_DSN = os.environ.get('SENTRY_DSN')

    # Email Configuration (SendGrid)
    SENDGRID_API_KEY = os.environ.get('SENDGRID_API_KEY')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'noreply@hrms.local')
    MAIL_SENDER_NAME = os.environ.get('MAIL_SENDER_NAME', 'HR Management')
    FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')

    # Cloudinary (File Storage)
    CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUDINARY_CLOUD_NAME')
    CLOUDINARY_API_KEY = os.environ.get('CLOUDINARY_API_KEY')
    CLOUDINARY_API_SECRET = os.environ.get('CLOUDINARY_API_SECRET')
    CLOUDINARY_DOCUMENTS_FOLDER = 'employee-documents'

    # File Upload Settings
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # whole document bundle
    ALLOWED_DOCUMENT_EXTENSIONS = {'jpg', 'jpeg', 'png', 'webp', 'pdf', 'doc', 'docx'}

    # Rate limiting (Flask-Limiter reads these)
    REDIS_URL = os.environ.get('REDIS_URL') or 'redis://localhost:6379/0'
    _redis_url = REDIS_URL
    if _redis_url.startswith('rediss://'):
        # Heroku Redis uses self-signed certificates in chain
        _redis_url += '?ssl_cert_reqs=none'
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', _redis_url)
    RATELIMIT_DEFAULT = '300 per hour'

    # Auth tokens
    VERIFICATION_TOKEN_HOURS = 24
    PASSWORD_RESET_TOKEN_HOURS = 1
    LOCKOUT_THRESHOLD = 5
    LOCKOUT_WINDOW_MINUTES = 15
    LOCKOUT_DURATION_MINUTES = 30

    # Organisation timezone used for clock-in / clock-out
    ORG_TIMEZONE = os.environ.get('ORG_TIMEZONE', 'UTC')

    # Leave policy (days per year)
    ANNUAL_LEAVE_DAYS = int(os.environ.get('ANNUAL_LEAVE_DAYS', 21))
    SICK_LEAVE_DAYS = int(os.environ.get('SICK_LEAVE_DAYS', 14))
    PERSONAL_LEAVE_DAYS = int(os.environ.get('PERSONAL_LEAVE_DAYS', 5))

    # Working day
    WORKDAY_START = os.environ.get('WORKDAY_START', '08:00')
    WORKDAY_END = os.environ.get('WORKDAY_END', '17:00')
    LATE_GRACE_MINUTES = int(os.environ.get('LATE_GRACE_MINUTES', 15))
    STANDARD_WORK_HOURS = 8.0
    HALF_DAY_HOURS = 4.0

    # Application
    ITEMS_PER_PAGE = 50


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SESSION_COOKIE_SECURE = True

    # Add SSL mode for Postgres on Heroku if not already present
    if 'postgresql://' in Config.database_url and 'sslmode' not in Config.database_url:
        SQLALCHEMY_DATABASE_URI = Config.database_url + '?sslmode=require'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    # Use DATABASE_URL_TEST from environment if set (for CI), otherwise in-memory SQLite
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL_TEST') or 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False  # Disable rate limiting in tests
    RATELIMIT_STORAGE_URI = 'memory://'
    SENDGRID_API_KEY = None
    SENTRY_DSN = None
    ORG_TIMEZONE = 'UTC'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
