import logging
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from estatedesk.domain.billing import utcnow
from estatedesk.domain.subscriptions import PaymentStatus, Plan, SubscriptionStatus
from estatedesk.errors import PersistenceError
from estatedesk.extensions import db
from estatedesk.models.office import Office
from estatedesk.models.payment import PaymentRecord
from estatedesk.models.subscription import Subscription
from estatedesk.models.user import User
from estatedesk.security.roles import Role
from estatedesk.services.admin_scope import build_office_filter

logger = logging.getLogger(__name__)

RECENT_PAYMENTS_LIMIT = 10
REVENUE_WINDOW_DAYS = 30

PROFILE_FIELDS = ("name", "phone", "email", "address", "city")


def list_offices(accessible_ids, search="", status=""):
    """
    Offices visible to an admin, newest first, with subscription summary
    and user count.
    """
    user_counts = (
        db.session.query(User.office_id, func.count(User.id).label("user_count"))
        .group_by(User.office_id)
        .subquery()
    )

    query = (
        db.session.query(Office, Subscription, user_counts.c.user_count)
        .outerjoin(Subscription, Subscription.office_id == Office.id)
        .outerjoin(user_counts, user_counts.c.office_id == Office.id)
        .filter(*build_office_filter(accessible_ids))
    )

    if search:
        query = query.filter(Office.name.icontains(search, autoescape=True))
    if status:
        query = query.filter(Subscription.status == status)

    rows = query.order_by(Office.created_at.desc()).all()

    return [
        {
            **office.to_dict(),
            "subscription": subscription.to_dict() if subscription else None,
            "user_count": user_count or 0,
        }
        for office, subscription, user_count in rows
    ]


def get_office_detail(office_id):
    office = db.session.get(Office, office_id)
    if office is None:
        return None

    users = (
        office.users
        .filter(User.role.in_([Role.MANAGER.value, Role.AGENT.value]))
        .order_by(User.created_at.asc())
        .all()
    )
    payments = office.payment_records.limit(RECENT_PAYMENTS_LIMIT).all()

    return {
        **office.to_dict(),
        "subscription": office.subscription.to_dict() if office.subscription else None,
        "users": [user.to_dict() for user in users],
        "payment_records": [payment.to_dict() for payment in payments],
    }


def recent_payments(office_id, limit=RECENT_PAYMENTS_LIMIT):
    return (
        PaymentRecord.query
        .filter_by(office_id=office_id)
        .order_by(PaymentRecord.created_at.desc())
        .limit(limit)
        .all()
    )


def _count_by(column, keys, office_filter):
    counts = dict.fromkeys(keys, 0)
    rows = (
        db.session.query(column, func.count(Subscription.id))
        .join(Subscription.office)
        .filter(*office_filter)
        .group_by(column)
        .all()
    )
    for key, count in rows:
        counts[key] = count
    return counts


def office_stats(accessible_ids, now=None):
    """
    Dashboard figures over the offices in ``accessible_ids``.

    Revenue covers VERIFIED payments of the last 30 days and is reported
    in Toman; stored amounts are Rials.
    """
    now = now or utcnow()
    start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    office_filter = build_office_filter(accessible_ids)

    offices = Office.query.filter(*office_filter)
    users = User.query.join(User.office).filter(*office_filter)

    revenue_rials = (
        db.session.query(func.coalesce(func.sum(PaymentRecord.amount), 0))
        .join(PaymentRecord.office)
        .filter(
            *office_filter,
            PaymentRecord.status == PaymentStatus.VERIFIED.value,
            PaymentRecord.created_at >= now - timedelta(days=REVENUE_WINDOW_DAYS),
        )
        .scalar()
    )

    return {
        "total_offices": offices.count(),
        "new_offices_this_month": offices.filter(Office.created_at >= start_of_month).count(),
        "by_plan": _count_by(Subscription.plan, [p.value for p in Plan], office_filter),
        "by_status": _count_by(
            Subscription.status, [s.value for s in SubscriptionStatus], office_filter
        ),
        "revenue_thirty_days": int(revenue_rials) // 10,
        "total_managers": users.filter(User.role == Role.MANAGER.value).count(),
        "total_agents": users.filter(User.role == Role.AGENT.value).count(),
        "inactive_users": users.filter(User.is_active.is_(False)).count(),
    }


def update_office_profile(office, **fields):
    """Overwrite the office's contact details. Blank values are stored as NULL."""
    for name in PROFILE_FIELDS:
        setattr(office, name, fields.get(name) or None)

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Office profile update failed", extra={"office_id": office.id})
        raise PersistenceError("Could not save office profile")

    logger.info("Office profile updated", extra={"office_id": office.id})
    return office
