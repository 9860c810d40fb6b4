# estatedesk/extensions.py
"""
Flask extensions initialization module.
Handles initialization and configuration of all Flask extensions.
"""

import logging

from flask import jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()
cors = CORS()
migrate = Migrate()
limiter = Limiter(key_func=get_remote_address)

logger = logging.getLogger(__name__)


def init_extensions(app):
    """Initialize all Flask extensions."""

    db.init_app(app)
    logger.info("SQLAlchemy initialized")

    migrate.init_app(app, db)
    logger.info("Flask-Migrate initialized")

    jwt.init_app(app)
    setup_jwt_callbacks()
    logger.info("JWT Manager initialized")

    init_cors(app)

    limiter.init_app(app)
    logger.info(
        "Rate limiter initialized",
        extra={"enabled": app.config.get("RATELIMIT_ENABLED", True)},
    )

    init_payment_gateway(app)

    return app


def init_cors(app):
    """Enable CORS for API routes only, restricted to the frontend origin."""
    frontend_url = app.config.get("FRONTEND_URL")

    if not frontend_url:
        logger.warning("FRONTEND_URL not set, CORS will be disabled")
        return

    if frontend_url == "*" and app.config.get("ENVIRONMENT") == "production":
        raise RuntimeError("Wildcard CORS origin '*' is not allowed in production")

    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": frontend_url,
                "supports_credentials": True,
                "allow_headers": ["Content-Type", "Authorization", "X-Request-ID"],
                "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
                "expose_headers": ["X-Request-ID"],
                "max_age": 600,
            }
        },
    )
    logger.info(f"CORS configured for API routes with origin: {frontend_url}")


def init_payment_gateway(app):
    """
    Register the payment gateway client on the app.

    Anything already registered under ``payment_gateway`` is kept, so a
    caller can install its own implementation before or after app creation.
    """
    from estatedesk.billing.zarinpal import ZarinpalGateway

    if "payment_gateway" not in app.extensions:
        app.extensions["payment_gateway"] = ZarinpalGateway.from_config(app.config)


def setup_jwt_callbacks():
    """Return JSON bodies shaped like the rest of the API for token errors."""

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        logger.warning(f"Unauthorized: {reason} - Path: {request.path}")
        return jsonify({
            "error": "Unauthorized",
            "message": "Authentication is required.",
            "path": request.path,
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        logger.warning(f"Invalid token: {reason} - Path: {request.path}")
        return jsonify({
            "error": "Unauthorized",
            "message": "The provided token is invalid.",
            "path": request.path,
        }), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({
            "error": "Unauthorized",
            "message": "The token has expired.",
            "path": request.path,
        }), 401
