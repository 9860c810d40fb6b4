# estatedesk/error_handlers.py
import logging
import traceback

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from estatedesk.errors import DomainError

logger = logging.getLogger(__name__)


def _error_response(error, message, status_code, payload=None):
    body = {
        "error": error,
        "message": message,
        "path": request.path,
        **(payload or {}),
    }
    return jsonify(body), status_code


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(400)
    def bad_request(e):
        logger.warning(f"Bad request: {str(e)} - Path: {request.path}")
        return _error_response(
            "Bad request",
            getattr(e, "description", None) or "The request could not be understood.",
            400,
        )

    @app.errorhandler(401)
    def unauthorized(e):
        logger.warning(f"Unauthorized: {str(e)} - Path: {request.path}")
        return _error_response(
            "Unauthorized",
            "Authentication is required and has failed or has not been provided.",
            401,
        )

    @app.errorhandler(403)
    def forbidden(e):
        logger.warning(f"Forbidden: {str(e)} - Path: {request.path}")
        return _error_response(
            "Forbidden",
            "You don't have permission to access this resource.",
            403,
        )

    @app.errorhandler(404)
    def not_found(e):
        logger.info(f"Not found: {request.path}")
        return _error_response(
            "Not found",
            "The requested resource was not found on the server.",
            404,
        )

    @app.errorhandler(405)
    def method_not_allowed(e):
        logger.warning(f"Method not allowed: {request.method} {request.path}")
        return _error_response(
            "Method not allowed",
            f"The {request.method} method is not supported for this endpoint.",
            405,
        )

    @app.errorhandler(429)
    def too_many_requests(e):
        logger.warning(f"Too many requests: {str(e)} - Path: {request.path}")
        return _error_response(
            "Too many requests",
            "Rate limit exceeded. Please try again later.",
            429,
        )

    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        log = logger.error if error.status_code >= 500 else logger.warning
        log(f"{error.__class__.__name__}: {error.message} - Path: {request.path}")
        return _error_response(
            error.__class__.__name__,
            error.message,
            error.status_code,
            error.payload,
        )

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return _error_response(e.name, e.description, e.code)

        logger.error(f"Unhandled exception - Path: {request.path}")
        logger.error(traceback.format_exc())
        return _error_response(
            "Server error",
            "An internal server error occurred. Please try again later.",
            500,
        )
