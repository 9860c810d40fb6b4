import logging
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from estatedesk.domain.billing import calculate_new_period_end, utcnow
from estatedesk.domain.subscriptions import PaymentStatus, SubscriptionStatus
from estatedesk.extensions import db
from estatedesk.models.payment import PaymentRecord
from estatedesk.models.subscription import Subscription

logger = logging.getLogger(__name__)

GATEWAY_OK_STATUS = "OK"


class CallbackOutcome(str, Enum):
    CANCELLED = "cancelled"
    ERROR = "error"
    ALREADY_VERIFIED = "already_verified"
    FAILED = "failed"
    SUCCESS = "success"


class PaymentReconciler:
    """
    Applies gateway payment callbacks to local state.

    The callback is unauthenticated. The authority token is looked up in
    the PaymentRecord table and the stored office and plan are what get
    credited; nothing else from the caller is trusted.

    PaymentRecord transitions PENDING -> VERIFIED | FAILED exactly once.
    A VERIFIED record and its subscription update are always written in
    the same transaction.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    def handle_callback(self, status, authority, now=None) -> CallbackOutcome:
        if status != GATEWAY_OK_STATUS:
            logger.info("Payment cancelled at gateway", extra={"authority": authority, "gateway_status": status})
            return CallbackOutcome.CANCELLED

        if not authority:
            logger.warning("Payment callback without authority")
            return CallbackOutcome.ERROR

        try:
            record = PaymentRecord.query.filter_by(authority=authority).first()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Payment record lookup failed", extra={"authority": authority})
            return CallbackOutcome.ERROR

        if record is None:
            logger.warning("Payment callback for unknown authority", extra={"authority": authority})
            return CallbackOutcome.ERROR

        record_id, office_id, plan = record.id, record.office_id, record.plan

        if record.status == PaymentStatus.VERIFIED:
            logger.info("Payment already verified", extra={"authority": authority})
            return CallbackOutcome.ALREADY_VERIFIED

        if record.status == PaymentStatus.FAILED:
            logger.info("Payment record already failed", extra={"authority": authority})
            return CallbackOutcome.FAILED

        result = self.gateway.verify_payment(plan, authority)
        if not result.success:
            logger.warning(
                "Payment verification failed",
                extra={"authority": authority, "office_id": office_id, "reason": result.error},
            )
            self._mark_failed(record_id, authority)
            return CallbackOutcome.FAILED

        if result.already_verified:
            # Gateway confirmed earlier but we never recorded it; apply now.
            logger.warning("Gateway had already verified a PENDING payment", extra={"authority": authority})

        new_period_end = calculate_new_period_end(self._current_period_end(office_id), now=now)

        return self._commit_verified(record_id, office_id, plan, authority, result.ref_id, new_period_end)

    def _current_period_end(self, office_id):
        try:
            subscription = Subscription.query.filter_by(office_id=office_id).first()
        except SQLAlchemyError:
            # Falls back to a fresh period from now
            db.session.rollback()
            logger.warning("Could not read subscription period", exc_info=True, extra={"office_id": office_id})
            return None
        return subscription.current_period_end if subscription else None

    def _mark_failed(self, record_id, authority):
        """
        Best-effort FAILED transition. Store errors are logged and swallowed;
        the record stays PENDING and can be reconciled by hand.
        """
        try:
            (
                PaymentRecord.query
                .filter_by(id=record_id, status=PaymentStatus.PENDING.value)
                .update(
                    {"status": PaymentStatus.FAILED.value, "updated_at": utcnow()},
                    synchronize_session=False,
                )
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("Could not mark payment record as failed", exc_info=True, extra={"authority": authority})

    def _commit_verified(self, record_id, office_id, plan, authority, ref_id, new_period_end):
        """Mark the record VERIFIED and extend the subscription, atomically."""
        timestamp = utcnow()
        try:
            # Conditional on PENDING so a concurrent duplicate callback cannot credit twice
            updated = (
                PaymentRecord.query
                .filter_by(id=record_id, status=PaymentStatus.PENDING.value)
                .update(
                    {
                        "status": PaymentStatus.VERIFIED.value,
                        "ref_id": ref_id,
                        "updated_at": timestamp,
                    },
                    synchronize_session=False,
                )
            )
            if updated != 1:
                db.session.rollback()
                logger.info("Payment applied by a concurrent callback", extra={"authority": authority})
                return CallbackOutcome.ALREADY_VERIFIED

            updated = (
                Subscription.query
                .filter_by(office_id=office_id)
                .update(
                    {
                        "plan": plan,
                        "status": SubscriptionStatus.ACTIVE.value,
                        "current_period_end": new_period_end,
                        "updated_at": timestamp,
                    },
                    synchronize_session=False,
                )
            )
            if updated != 1:
                db.session.rollback()
                logger.error(
                    "Verified payment has no subscription to credit; manual reconciliation required",
                    extra={"authority": authority, "office_id": office_id, "ref_id": ref_id},
                )
                return CallbackOutcome.ERROR

            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(
                "Payment captured at gateway but local commit failed; manual reconciliation required",
                extra={"authority": authority, "office_id": office_id, "ref_id": ref_id},
            )
            return CallbackOutcome.ERROR

        logger.info(
            "Payment verified and subscription extended",
            extra={
                "authority": authority,
                "office_id": office_id,
                "plan": plan,
                "ref_id": ref_id,
                "current_period_end": new_period_end.isoformat(),
            },
        )
        return CallbackOutcome.SUCCESS
