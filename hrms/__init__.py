import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_bcrypt import Bcrypt
from flask_wtf.csrf import CSRFProtect, CSRFError
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from config import config
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
bcrypt = Bcrypt()
csrf = CSRFProtect()
limiter = Limiter(key_func=get_remote_address)


def init_sentry(app):
    """Initialize Sentry error tracking and performance monitoring"""
    sentry_dsn = app.config.get('SENTRY_DSN')

    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=0.1,
            release=os.environ.get('HEROKU_SLUG_COMMIT', 'unknown'),
            environment=app.config.get('FLASK_ENV', 'development'),
            # Employee records are PII
            send_default_pii=False,
            sample_rate=1.0,
        )
        app.logger.info('Sentry initialized')
    else:
        app.logger.debug('Sentry DSN not configured - error tracking disabled')


def format_validation_errors(error):
    """Flatten a pydantic ValidationError into field/message pairs"""
    details = []
    for err in error.errors():
        field = '.'.join(str(part) for part in err.get('loc', ()))
        details.append({'field': field or '__root__', 'message': err.get('msg')})
    return details


def register_error_handlers(app):
    """All errors are answered with a JSON result object"""
    from hrms.services.errors import ServiceError

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify({
            'success': False,
            'error': 'Validation error',
            'details': format_validation_errors(error)
        }), 400

    @app.errorhandler(ServiceError)
    def service_error(error):
        db.session.rollback()
        return jsonify({'success': False, 'error': error.message}), error.status_code

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return jsonify({'success': False, 'error': 'Your session expired. Please refresh and try again.'}), 400

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'success': False, 'error': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()  # Rollback any failed database transactions
        app.logger.exception('Unhandled error')
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


def create_app(config_name='default'):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize Sentry error tracking (do this early to catch initialization errors)
    init_sentry(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    # Security headers (Talisman) - only in production
    if config_name == 'production':
        Talisman(
            app,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=31536000,  # 1 year
            content_security_policy={'default-src': "'self'"},
            frame_options='DENY',
        )

    # Import all models for Flask-Migrate
    with app.app_context():
        from hrms import models  # noqa: F401

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    # Register blueprints
    from hrms.blueprints.auth import auth_bp
    from hrms.blueprints.users import users_bp
    from hrms.blueprints.organization import organization_bp
    from hrms.blueprints.employees import employees_bp
    from hrms.blueprints.attendance import attendance_bp
    from hrms.blueprints.leaves import leaves_bp
    from hrms.blueprints.concurrency import concurrency_bp
    from hrms.blueprints.documents import documents_bp
    from hrms.blueprints.performance import performance_bp
    from hrms.blueprints.payroll import payroll_bp
    from hrms.blueprints.recruitment import recruitment_bp
    from hrms.blueprints.dashboard import dashboard_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(organization_bp)
    app.register_blueprint(employees_bp, url_prefix='/employees')
    app.register_blueprint(attendance_bp, url_prefix='/attendance')
    app.register_blueprint(leaves_bp, url_prefix='/leaves')
    app.register_blueprint(concurrency_bp, url_prefix='/concurrency')
    app.register_blueprint(documents_bp, url_prefix='/employee-documents')
    app.register_blueprint(performance_bp, url_prefix='/performance')
    app.register_blueprint(payroll_bp)
    app.register_blueprint(recruitment_bp, url_prefix='/recruitment')
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')

    register_error_handlers(app)

    # Health check endpoint for monitoring and load balancers
    @app.route('/health')
    def health_check():
        """Health check endpoint - returns 200 if app is healthy"""
        from sqlalchemy import text

        health_status = {
            'status': 'healthy',
            'version': os.environ.get('HEROKU_RELEASE_VERSION', 'unknown'),
            'environment': app.config.get('FLASK_ENV', 'development')
        }

        try:
            db.session.execute(text('SELECT 1'))
            health_status['database'] = 'connected'
        except Exception as e:
            app.logger.error(f'Health check database error: {e}')
            health_status['status'] = 'unhealthy'
            health_status['database'] = f'error: {str(e)}'
            return jsonify(health_status), 500

        return jsonify(health_status), 200

    return app
