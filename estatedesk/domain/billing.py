from datetime import datetime, timedelta, timezone

PERIOD_DAYS = 30


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime. Naive values are read as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def extend_period(
    current_end: datetime | None,
    days: int,
    now: datetime | None = None,
) -> datetime:
    """
    Push a period end forward by ``days``.

    A period still running stacks on its own end; a missing or lapsed one
    (including one ending exactly now) starts again from ``now``.
    """
    now = as_utc(now) or utcnow()
    current_end = as_utc(current_end)

    base = current_end if current_end is not None and current_end > now else now
    return base + timedelta(days=days)


def calculate_new_period_end(
    current_period_end: datetime | None,
    now: datetime | None = None,
) -> datetime:
    """Period end after one successful subscription payment."""
    return extend_period(current_period_end, PERIOD_DAYS, now=now)
