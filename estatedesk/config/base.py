import os


class ConfigurationError(Exception):
    """
    Raised when an invalid or unsupported configuration is requested.
    """
    pass


class BaseConfig:
    """
    Base configuration shared by all environments.
    """

    ENVIRONMENT = "base"

    # Flask
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")

    # Security
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Application
    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000")
    FRONTEND_URL = os.getenv("FRONTEND_URL")

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///estatedesk.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT (tokens are issued by the external auth provider)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ERROR_MESSAGE_KEY = "message"

    # Zarinpal payment gateway
    ZARINPAL_MERCHANT_ID = os.getenv("ZARINPAL_MERCHANT_ID")
    ZARINPAL_API_BASE = os.getenv(
        "ZARINPAL_API_BASE", "https://api.zarinpal.com/pg/v4/payment"
    )
    ZARINPAL_START_PAY_BASE = os.getenv(
        "ZARINPAL_START_PAY_BASE", "https://www.zarinpal.com/pg/StartPay"
    )
    ZARINPAL_TIMEOUT = float(os.getenv("ZARINPAL_TIMEOUT", "10"))

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    PAYMENT_REQUEST_RATE_LIMIT = "10 per minute"

    # Logging / monitoring
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_REQUESTS = False
    SENTRY_DSN = os.getenv("SENTRY_DSN")
