from dataclasses import dataclass
from functools import wraps
import logging

from flask import abort
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from estatedesk.security.roles import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as described by its access token."""

    id: str
    role: Role
    office_id: str | None = None


def current_actor() -> Actor:
    """
    Build the Actor for the current request from its verified JWT.

    Must be called after ``verify_jwt_in_request``.
    """
    claims = get_jwt()
    role = Role.from_claim(claims.get("role"))
    if role is None:
        logger.warning(f"Token carries unknown role: {claims.get('role')!r}")
        abort(403)

    return Actor(
        id=str(get_jwt_identity()),
        role=role,
        office_id=claims.get("office_id"),
    )


def role_required(*roles):
    """
    Decorator restricting a view to callers holding one of ``roles``.
    Use as: @role_required(Role.MANAGER)
    """
    allowed = {Role(r) for r in roles}

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            actor = current_actor()
            if actor.role not in allowed:
                logger.warning(
                    f"Role {actor.role.value} denied for {fn.__name__}",
                    extra={"user_id": actor.id},
                )
                abort(403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
