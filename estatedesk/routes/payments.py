import logging

from flask import Blueprint, current_app, jsonify, redirect, request

from estatedesk.billing import get_payment_gateway
from estatedesk.billing.payments import request_subscription_payment
from estatedesk.billing.reconciliation import CallbackOutcome, PaymentReconciler
from estatedesk.errors import PermissionDenied
from estatedesk.extensions import limiter
from estatedesk.schemas import RequestPaymentSchema, parse_body
from estatedesk.security.auth import current_actor, role_required
from estatedesk.security.roles import Role

logger = logging.getLogger(__name__)

payments_bp = Blueprint("payments", __name__)


def _payment_rate_limit():
    return current_app.config.get("PAYMENT_REQUEST_RATE_LIMIT", "10 per minute")


def settings_redirect_url(outcome):
    base = current_app.config.get("APP_BASE_URL", "").rstrip("/")
    return f"{base}/settings?payment={outcome}"


@payments_bp.route("/request", methods=["POST"])
@limiter.limit(_payment_rate_limit)
@role_required(Role.MANAGER)
def request_payment():
    """
    Start a subscription payment for the caller's office.

    Body:
        {"plan": "SMALL" | "LARGE"}

    Returns:
        JSON with the gateway pay URL and authority token.
    """
    actor = current_actor()
    if not actor.office_id:
        raise PermissionDenied("Account is not linked to an office")

    data = parse_body(RequestPaymentSchema, request.get_json(silent=True))

    base = current_app.config.get("APP_BASE_URL", "").rstrip("/")
    initiation = request_subscription_payment(
        office_id=actor.office_id,
        plan=data.plan,
        gateway=get_payment_gateway(),
        callback_url=f"{base}/api/payments/verify",
    )

    return jsonify({
        "status": "success",
        "data": {
            "pay_url": initiation.pay_url,
            "authority": initiation.record.authority,
        },
    }), 200


@payments_bp.route("/verify", methods=["GET"])
def verify_payment():
    """
    Gateway redirect target after the payer finishes (or abandons) paying.

    No authentication: the authority is resolved against stored payment
    records. Always answers with a redirect to the settings page.
    """
    authority = request.args.get("Authority") or request.args.get("authority") or ""
    status = request.args.get("Status") or request.args.get("status") or ""

    try:
        outcome = PaymentReconciler(get_payment_gateway()).handle_callback(status, authority)
    except Exception:
        logger.exception("Unhandled error in payment callback", extra={"authority": authority})
        outcome = CallbackOutcome.ERROR

    return redirect(settings_redirect_url(outcome.value))
