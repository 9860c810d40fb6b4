"""
Office access scoping for platform administrators.

``None`` means unrestricted and a list (possibly empty) means restricted to
exactly those offices. Callers must never collapse one into the other.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from estatedesk.errors import NotFoundError, PersistenceError, ValidationError
from estatedesk.extensions import db
from estatedesk.models.admin_assignment import AdminOfficeAssignment
from estatedesk.models.office import Office
from estatedesk.models.user import User
from estatedesk.security.roles import Role

logger = logging.getLogger(__name__)

MAX_ASSIGNMENTS = 100


def get_accessible_office_ids(actor) -> list[str] | None:
    """
    Office ids ``actor`` may see.

    Returns:
        None for SUPER_ADMIN (no filter), the assigned ids for MID_ADMIN,
        and an empty list for every other role.
    """
    if actor.role == Role.SUPER_ADMIN:
        return None

    if not actor.role.is_platform_admin:
        return []

    rows = (
        db.session.query(AdminOfficeAssignment.office_id)
        .filter(AdminOfficeAssignment.admin_user_id == actor.id)
        .all()
    )
    return [office_id for (office_id,) in rows]


def build_office_filter(accessible_ids: list[str] | None) -> list:
    """
    Criteria restricting an Office query to ``accessible_ids``.

    Use as ``Office.query.filter(*build_office_filter(ids), other_criteria)``.
    """
    if accessible_ids is None:
        return []
    return [Office.id.in_(accessible_ids)]


def can_access_office(actor, office_id) -> bool:
    accessible_ids = get_accessible_office_ids(actor)
    return accessible_ids is None or office_id in accessible_ids


def get_mid_admin(user_id):
    """
    Raises:
        NotFoundError: the user does not exist or is not a MID_ADMIN.
    """
    target = User.query.filter_by(id=user_id, role=Role.MID_ADMIN.value).first()
    if target is None:
        raise NotFoundError("Mid admin not found")
    return target


def list_mid_admins():
    """Every MID_ADMIN with its assignment count, newest first."""
    assignment_counts = (
        db.session.query(
            AdminOfficeAssignment.admin_user_id,
            func.count(AdminOfficeAssignment.id).label("assignment_count"),
        )
        .group_by(AdminOfficeAssignment.admin_user_id)
        .subquery()
    )

    rows = (
        db.session.query(User, assignment_counts.c.assignment_count)
        .outerjoin(assignment_counts, assignment_counts.c.admin_user_id == User.id)
        .filter(User.role == Role.MID_ADMIN.value)
        .order_by(User.created_at.desc())
        .all()
    )

    return [
        {**user.to_dict(), "assignment_count": assignment_count or 0}
        for user, assignment_count in rows
    ]


def list_assignments(admin_user_id):
    return (
        AdminOfficeAssignment.query
        .filter_by(admin_user_id=admin_user_id)
        .order_by(AdminOfficeAssignment.assigned_at.asc())
        .all()
    )


def set_assignments(admin_user_id, office_ids):
    """
    Replace all office assignments of a MID_ADMIN in one transaction.

    Raises:
        NotFoundError: the user does not exist or is not a MID_ADMIN.
        ValidationError: too many ids or an id matches no office.
        PersistenceError: the replacement could not be committed.
    """
    get_mid_admin(admin_user_id)

    # Preserve order, drop duplicates
    office_ids = list(dict.fromkeys(office_ids))
    if len(office_ids) > MAX_ASSIGNMENTS:
        raise ValidationError(f"At most {MAX_ASSIGNMENTS} offices can be assigned")

    if office_ids:
        known = {
            office_id
            for (office_id,) in db.session.query(Office.id).filter(Office.id.in_(office_ids))
        }
        unknown = [office_id for office_id in office_ids if office_id not in known]
        if unknown:
            raise ValidationError("Unknown office ids", payload={"unknown_office_ids": unknown})

    try:
        AdminOfficeAssignment.query.filter_by(admin_user_id=admin_user_id).delete(
            synchronize_session=False
        )
        db.session.add_all(
            AdminOfficeAssignment(admin_user_id=admin_user_id, office_id=office_id)
            for office_id in office_ids
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Could not replace office assignments", extra={"admin_user_id": admin_user_id})
        raise PersistenceError("Could not save assignments")

    logger.info(
        "Office assignments replaced",
        extra={"admin_user_id": admin_user_id, "office_count": len(office_ids)},
    )
    return list_assignments(admin_user_id)
