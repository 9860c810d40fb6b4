class DomainError(Exception):
    """Base error for business rule failures. Carries an HTTP status."""

    status_code = 400

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class ValidationError(DomainError):
    status_code = 400


class PermissionDenied(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class PaymentGatewayError(DomainError):
    """The payment gateway rejected or could not process a request."""

    status_code = 502


class PersistenceError(DomainError):
    status_code = 500
