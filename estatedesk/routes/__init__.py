from estatedesk.routes.admin import admin_bp
from estatedesk.routes.health import health_bp
from estatedesk.routes.payments import payments_bp
from estatedesk.routes.settings import settings_bp


def register_routes(app):
    """Register all blueprints"""
    app.register_blueprint(health_bp)
    app.register_blueprint(payments_bp, url_prefix="/api/payments")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
