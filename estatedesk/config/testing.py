from .base import BaseConfig


class TestingConfig(BaseConfig):
    """
    Test configuration. In-memory database, no rate limiting.
    """

    ENVIRONMENT = "testing"
    TESTING = True

    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"

    APP_BASE_URL = "http://localhost:3000"
    ZARINPAL_MERCHANT_ID = "00000000-0000-0000-0000-000000000000"

    RATELIMIT_ENABLED = False
    SENTRY_DSN = None
