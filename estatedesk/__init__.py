"""
Flask application factory.
Fails fast on configuration errors.
"""

import logging
import sys
from typing import Optional

import sentry_sdk
from flask import Flask
from sentry_sdk.integrations.flask import FlaskIntegration

from estatedesk.config import ConfigurationError, get_config
from estatedesk.error_handlers import register_error_handlers
from estatedesk.extensions import db, init_extensions
from estatedesk.logging_config import setup_logging
from estatedesk.routes import register_routes

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def setup_sentry(app: Flask) -> None:
    """Initialize Sentry error tracking"""
    sentry_dsn = app.config.get("SENTRY_DSN")

    if sentry_dsn and app.config.get("ENVIRONMENT") == "production":
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment="production",
            release=__version__,
            send_default_pii=False,
        )
        logger.info("Sentry error tracking initialized")


def setup_security_headers(app: Flask) -> None:
    """Add security headers to all responses"""

    @app.after_request
    def add_security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if app.config.get("ENVIRONMENT") == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Application factory.

    Args:
        config_name: Configuration name (development, production, testing)

    Returns:
        Flask application instance

    Raises:
        ConfigurationError: If configuration validation fails
    """
    app = Flask(__name__)

    try:
        app.config.from_object(get_config(config_name))
    except ConfigurationError as e:
        print(f"CRITICAL: Configuration error: {str(e)}", file=sys.stderr)
        raise

    setup_logging(app)
    logger.info(f"Starting application in {app.config.get('ENVIRONMENT')} mode")

    setup_sentry(app)
    init_extensions(app)
    setup_security_headers(app)
    register_error_handlers(app)
    register_routes(app)

    if app.config.get("ENVIRONMENT") == "development":
        with app.app_context():
            import estatedesk.models  # noqa: F401  (register tables)
            db.create_all()

    logger.info("Application initialization completed")
    return app
