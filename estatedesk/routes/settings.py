from flask import Blueprint, jsonify, request

from estatedesk.errors import NotFoundError, PermissionDenied
from estatedesk.extensions import db
from estatedesk.models.office import Office
from estatedesk.schemas import UpdateOfficeProfileSchema, parse_body
from estatedesk.security.auth import current_actor, role_required
from estatedesk.security.roles import Role
from estatedesk.services.office_service import recent_payments, update_office_profile

settings_bp = Blueprint("settings", __name__)


def _caller_office():
    office_id = current_actor().office_id
    if not office_id:
        raise PermissionDenied("Account is not linked to an office")

    office = db.session.get(Office, office_id)
    if office is None:
        raise NotFoundError("Office not found")
    return office


@settings_bp.route("", methods=["GET"])
@role_required(Role.MANAGER)
def get_settings():
    """Office profile, subscription and recent payments of the caller's office."""
    office = _caller_office()

    return jsonify({
        "status": "success",
        "data": {
            "office": office.to_dict(),
            "subscription": office.subscription.to_dict() if office.subscription else None,
            "payment_records": [p.to_dict() for p in recent_payments(office.id)],
        },
    }), 200


@settings_bp.route("", methods=["PATCH"])
@role_required(Role.MANAGER)
def update_settings():
    """
    Replace the contact details of the caller's office.

    Body:
        name (required), phone, email, address, city. Omitted or blank
        fields are cleared.
    """
    office = _caller_office()
    data = parse_body(UpdateOfficeProfileSchema, request.get_json(silent=True))

    update_office_profile(office, **data.model_dump())

    return jsonify({"status": "success", "data": office.to_dict()}), 200
