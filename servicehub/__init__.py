import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

db = SQLAlchemy()

logger = logging.getLogger(__name__)

_CRITICAL_SETTINGS = ("SECRET_KEY", "JWT_SECRET", "DATABASE_URL")


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    logging.getLogger("servicehub").setLevel(level)


def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=0.1,
    )


def _startup_checks(config_name):
    if config_name in ("development", "testing"):
        return
    missing = [name for name in _CRITICAL_SETTINGS if not os.environ.get(name)]
    if missing:
        logger.critical("MISSING CRITICAL ENV VARS (app may not work correctly): %s", ", ".join(missing))


def _register_error_handlers(app):
    from servicehub.errors import EngineError

    @app.errorhandler(EngineError)
    def handle_engine_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        db.session.rollback()
        logger.exception("Unhandled database error")
        return jsonify({"success": False, "error": "Database error"}), 500

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"success": False, "error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({
            "success": False,
            "error": "Too many requests. Please try again later.",
        }), 429

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"success": False, "error": "Internal server error"}), 500


def create_app(config_name=None):
    """Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    app.config.from_object(config.get(config_name, config['default']))

    _configure_logging(app)
    _init_sentry(app)
    _startup_checks(config_name)

    # Initialize extensions
    from servicehub.extensions import limiter
    db.init_app(app)
    limiter.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})

    # Register blueprints
    from servicehub.blueprints.service_requests import service_requests_bp
    from servicehub.blueprints.admin import admin_bp

    api_prefix = app.config['API_PREFIX']
    app.register_blueprint(service_requests_bp, url_prefix=f'{api_prefix}/service-requests')
    app.register_blueprint(admin_bp, url_prefix=f'{api_prefix}/admin')

    _register_error_handlers(app)

    from servicehub.middleware import RequestIdMiddleware
    app.wsgi_app = RequestIdMiddleware(app.wsgi_app)

    # Health check endpoint
    @app.route('/health')
    def health():
        return {'status': 'healthy', 'service': 'servicehub'}, 200

    return app
