from .base import BaseConfig, ConfigurationError


class ProductionConfig(BaseConfig):
    """
    Production configuration.
    """

    ENVIRONMENT = "production"
    DEBUG = False

    SESSION_COOKIE_SECURE = True

    @classmethod
    def validate(cls):
        """Fail fast when a required production setting is missing."""
        missing = [
            name for name in ("SECRET_KEY", "JWT_SECRET_KEY", "ZARINPAL_MERCHANT_ID")
            if not getattr(cls, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required production settings: {', '.join(missing)}"
            )

        if "sqlite" in cls.SQLALCHEMY_DATABASE_URI.lower():
            raise ConfigurationError("SQLite is not suitable for production")
