from flask import current_app

from estatedesk.billing.gateway import PaymentGateway


def get_payment_gateway() -> PaymentGateway:
    """Return the gateway client registered on the current app."""
    return current_app.extensions["payment_gateway"]
