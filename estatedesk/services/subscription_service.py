import logging

from sqlalchemy.exc import SQLAlchemyError

from estatedesk.domain.billing import extend_period, utcnow
from estatedesk.domain.subscriptions import Plan, TRIAL_DAYS, SubscriptionStatus
from estatedesk.errors import NotFoundError, PersistenceError
from estatedesk.extensions import db
from estatedesk.models.subscription import Subscription

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for subscription provisioning and manual admin adjustment"""

    @staticmethod
    def provision_trial(office, now=None):
        """Attach a fresh TRIAL subscription to a new office (not committed)."""
        subscription = Subscription(
            office=office,
            plan=Plan.TRIAL.value,
            status=SubscriptionStatus.ACTIVE.value,
            trial_ends_at=extend_period(None, TRIAL_DAYS, now=now),
        )
        db.session.add(subscription)
        return subscription

    @staticmethod
    def get_for_office(office_id):
        subscription = Subscription.query.filter_by(office_id=office_id).first()
        if subscription is None:
            raise NotFoundError("Subscription not found")
        return subscription

    @staticmethod
    def adjust(office_id, plan=None, status=None, extend_days=None, now=None):
        """
        Apply an admin's manual change to an office subscription.

        Extending stacks on the trial end while the plan (before any plan
        change) is TRIAL, and on the paid period end otherwise. A lapsed
        end restarts from now.
        """
        subscription = SubscriptionService.get_for_office(office_id)

        if extend_days:
            if subscription.plan == Plan.TRIAL:
                subscription.trial_ends_at = extend_period(
                    subscription.trial_ends_at, extend_days, now=now
                )
            else:
                subscription.current_period_end = extend_period(
                    subscription.current_period_end, extend_days, now=now
                )

        if plan is not None:
            subscription.plan = Plan(plan).value
        if status is not None:
            subscription.status = SubscriptionStatus(status).value
        subscription.updated_at = utcnow()

        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Subscription adjustment failed", extra={"office_id": office_id})
            raise PersistenceError("Could not update subscription")

        logger.info(
            "Subscription adjusted by admin",
            extra={
                "office_id": office_id,
                "plan": subscription.plan,
                "subscription_status": subscription.status,
                "extend_days": extend_days,
            },
        )
        return subscription
