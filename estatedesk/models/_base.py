import uuid

from estatedesk.domain.billing import utcnow


def generate_id():
    return uuid.uuid4().hex


def isoformat(value):
    return value.isoformat() if value else None


__all__ = ["generate_id", "isoformat", "utcnow"]
