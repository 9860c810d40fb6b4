import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from estatedesk.domain.subscriptions import PaymentStatus, get_plan_price
from estatedesk.errors import PaymentGatewayError, PersistenceError, ValidationError
from estatedesk.extensions import db
from estatedesk.models.payment import PaymentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentInitiation:
    record: PaymentRecord
    pay_url: str


def request_subscription_payment(office_id, plan, gateway, callback_url) -> PaymentInitiation:
    """
    Open a payment session for ``plan`` and persist it as a PENDING record.

    The record is keyed by the gateway authority, which is what the
    callback later uses to find the office and plan to credit.

    Raises:
        ValidationError: plan is not purchasable.
        PaymentGatewayError: the gateway refused or could not be reached.
        PersistenceError: the PENDING record could not be saved.
    """
    try:
        price = get_plan_price(plan)
    except ValueError as e:
        raise ValidationError(str(e))

    result = gateway.request_payment(price.plan, callback_url)
    if not result.success:
        logger.warning(
            "Payment request failed at gateway",
            extra={"office_id": office_id, "plan": price.plan.value, "reason": result.error},
        )
        raise PaymentGatewayError(result.error or "Payment gateway error")

    record = PaymentRecord(
        office_id=office_id,
        plan=price.plan.value,
        amount=price.price_rials,
        authority=result.authority,
        status=PaymentStatus.PENDING.value,
    )

    try:
        db.session.add(record)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(
            "Could not persist payment record",
            extra={"office_id": office_id, "authority": result.authority},
        )
        raise PersistenceError("Could not save payment details")

    logger.info(
        "Payment record created",
        extra={"office_id": office_id, "authority": record.authority, "amount": record.amount},
    )
    return PaymentInitiation(record=record, pay_url=result.pay_url)
