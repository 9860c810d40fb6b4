from flask import Blueprint, abort, jsonify, request

from estatedesk.domain.subscriptions import SubscriptionStatus
from estatedesk.errors import ValidationError
from estatedesk.schemas import SetAssignmentsSchema, UpdateSubscriptionSchema, parse_body
from estatedesk.security.auth import current_actor, role_required
from estatedesk.security.roles import ADMIN_ROLES, Role
from estatedesk.services import admin_scope, office_service
from estatedesk.services.subscription_service import SubscriptionService

admin_bp = Blueprint("admin", __name__)


def _require_office_access(office_id):
    # Out-of-scope offices look the same as missing ones
    if not admin_scope.can_access_office(current_actor(), office_id):
        abort(404)


@admin_bp.route("/offices", methods=["GET"])
@role_required(*ADMIN_ROLES)
def list_offices():
    """
    List offices visible to the calling admin.

    Query params:
        search: case-insensitive substring of the office name
        status: subscription status (ACTIVE, GRACE, LOCKED, CANCELLED)
    """
    search = request.args.get("search", "").strip()
    status = request.args.get("status", "").strip().upper()

    if status and status not in SubscriptionStatus.__members__:
        raise ValidationError(f"Unknown subscription status: {status}")

    accessible_ids = admin_scope.get_accessible_office_ids(current_actor())
    offices = office_service.list_offices(accessible_ids, search=search, status=status)

    return jsonify({"status": "success", "data": offices}), 200


@admin_bp.route("/stats", methods=["GET"])
@role_required(*ADMIN_ROLES)
def stats():
    """Office, subscription, revenue and user figures within the caller's scope."""
    accessible_ids = admin_scope.get_accessible_office_ids(current_actor())
    return jsonify({"status": "success", "data": office_service.office_stats(accessible_ids)}), 200


@admin_bp.route("/offices/<office_id>", methods=["GET"])
@role_required(*ADMIN_ROLES)
def get_office(office_id):
    _require_office_access(office_id)

    detail = office_service.get_office_detail(office_id)
    if detail is None:
        abort(404)

    return jsonify({"status": "success", "data": detail}), 200


@admin_bp.route("/offices/<office_id>/subscription", methods=["PATCH"])
@role_required(*ADMIN_ROLES)
def update_subscription(office_id):
    """
    Manually change an office subscription.

    Body (all optional):
        plan: TRIAL | SMALL | LARGE
        status: ACTIVE | GRACE | LOCKED | CANCELLED
        extend_days: 1..365
    """
    _require_office_access(office_id)
    data = parse_body(UpdateSubscriptionSchema, request.get_json(silent=True))

    subscription = SubscriptionService.adjust(
        office_id,
        plan=data.plan,
        status=data.status,
        extend_days=data.extend_days,
    )

    return jsonify({"status": "success", "data": subscription.to_dict()}), 200


@admin_bp.route("/mid-admins", methods=["GET"])
@role_required(Role.SUPER_ADMIN)
def list_mid_admins():
    return jsonify({"status": "success", "data": admin_scope.list_mid_admins()}), 200


@admin_bp.route("/mid-admins/<user_id>/assignments", methods=["GET"])
@role_required(Role.SUPER_ADMIN)
def get_assignments(user_id):
    assignments = admin_scope.list_assignments(user_id)
    return jsonify({
        "status": "success",
        "data": [assignment.to_dict() for assignment in assignments],
    }), 200


@admin_bp.route("/mid-admins/<user_id>/assignments", methods=["PUT"])
@role_required(Role.SUPER_ADMIN)
def put_assignments(user_id):
    """Replace every office assignment of a mid admin."""
    admin_scope.get_mid_admin(user_id)
    data = parse_body(SetAssignmentsSchema, request.get_json(silent=True))
    assignments = admin_scope.set_assignments(user_id, data.office_ids)

    return jsonify({
        "status": "success",
        "data": [assignment.to_dict() for assignment in assignments],
    }), 200
