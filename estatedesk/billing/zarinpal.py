import logging

import requests

from estatedesk.billing.gateway import PaymentRequestResult, VerificationResult
from estatedesk.domain.subscriptions import get_plan_price

logger = logging.getLogger(__name__)

CODE_SUCCESS = 100
CODE_ALREADY_VERIFIED = 101


def _has_errors(payload):
    # Zarinpal reports errors as a list or an object depending on the failure
    errors = payload.get("errors")
    return isinstance(errors, (list, dict)) and len(errors) > 0


class ZarinpalGateway:
    """Zarinpal v4 REST client."""

    def __init__(self, merchant_id, api_base, start_pay_base, timeout=10, session=None):
        self.merchant_id = merchant_id
        self.api_base = api_base.rstrip("/")
        self.start_pay_base = start_pay_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            merchant_id=config.get("ZARINPAL_MERCHANT_ID"),
            api_base=config["ZARINPAL_API_BASE"],
            start_pay_base=config["ZARINPAL_START_PAY_BASE"],
            timeout=config.get("ZARINPAL_TIMEOUT", 10),
        )

    def _post(self, endpoint, body):
        """POST JSON to the gateway. Returns the decoded body or None."""
        try:
            response = self.session.post(
                f"{self.api_base}/{endpoint}",
                json=body,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Zarinpal {endpoint} transport error: {e}")
            return None

        if not response.ok:
            logger.error(
                f"Zarinpal {endpoint} HTTP error",
                extra={"status_code": response.status_code},
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.error(f"Zarinpal {endpoint} returned a non-JSON body")
            return None

        if not isinstance(payload, dict):
            logger.error(f"Zarinpal {endpoint} returned an unexpected body")
            return None
        return payload

    def request_payment(self, plan, callback_url):
        if not self.merchant_id:
            logger.error("ZARINPAL_MERCHANT_ID is not configured")
            return PaymentRequestResult.failed("Payment gateway is not configured")

        try:
            price = get_plan_price(plan)
        except ValueError as e:
            return PaymentRequestResult.failed(str(e))

        payload = self._post("request.json", {
            "merchant_id": self.merchant_id,
            "amount": price.price_rials,
            "description": f"Subscription renewal - {price.label} plan",
            "callback_url": callback_url,
        })
        if payload is None:
            return PaymentRequestResult.failed("Could not reach the payment gateway")

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            data = {}
        authority = data.get("authority")

        if _has_errors(payload) or data.get("code") != CODE_SUCCESS or not authority:
            logger.error(
                "Zarinpal payment request rejected",
                extra={"code": data.get("code"), "errors": payload.get("errors")},
            )
            return PaymentRequestResult.failed("Payment request was rejected")

        logger.info("Zarinpal payment requested", extra={"authority": authority, "plan": price.plan.value})
        return PaymentRequestResult(
            success=True,
            authority=authority,
            pay_url=f"{self.start_pay_base}/{authority}",
        )

    def verify_payment(self, plan, authority):
        if not self.merchant_id:
            logger.error("ZARINPAL_MERCHANT_ID is not configured")
            return VerificationResult.failed("Payment gateway is not configured")

        try:
            amount = get_plan_price(plan).price_rials
        except ValueError as e:
            return VerificationResult.failed(str(e))

        payload = self._post("verify.json", {
            "merchant_id": self.merchant_id,
            "amount": amount,
            "authority": authority,
        })
        if payload is None:
            return VerificationResult.failed("Could not reach the payment gateway")

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            data = {}
        code = data.get("code")
        ref_id = str(data.get("ref_id") or "")

        if code == CODE_ALREADY_VERIFIED:
            logger.info("Zarinpal reports payment already verified", extra={"authority": authority})
            return VerificationResult(success=True, ref_id=ref_id, already_verified=True)

        if code == CODE_SUCCESS:
            return VerificationResult(success=True, ref_id=ref_id)

        logger.warning(
            "Zarinpal verification failed",
            extra={"authority": authority, "code": code},
        )
        return VerificationResult.failed("Payment was not verified")
