from flask import Blueprint, current_app, request

from ..routes.auth_routes import admin_required, token_required
from ..schemas.order_schema import serialize_order
from ..schemas.qr_schema import serialize_qr_code
from ..schemas.user_schema import serialize_admin_user
from ..services import admin_service, order_service
from ..services.membership_service import get_user_membership
from ..utils.response import api_response
from ..utils.validation import parse_quantity

admin_bp = Blueprint("admin", __name__)

# request key -> User attribute
USER_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "company": "company",
    "savedAddress": "saved_address",
    "isAdmin": "is_admin",
}


@admin_bp.route("/api/admin/users", methods=["GET"])
@token_required
@admin_required
def list_users(current_user):
    users = [serialize_admin_user(user, membership) for user, membership in admin_service.list_users()]
    return api_response(True, "Users fetched", users)


@admin_bp.route("/api/admin/users/<user_id>", methods=["PUT"])
@token_required
@admin_required
def update_user(current_user, user_id):
    data = request.get_json(silent=True) or {}
    updates = {USER_FIELD_MAP[k]: v for k, v in data.items() if k in USER_FIELD_MAP}
    if "is_admin" in updates:
        updates["is_admin"] = bool(updates["is_admin"])

    user = admin_service.update_user(user_id, updates, tier_name=data.get("membershipTier"))
    current_app.logger.info(f"User {user.id} updated by {current_user.email}")
    return api_response(True, "User updated", serialize_admin_user(user, get_user_membership(user.id)))


@admin_bp.route("/api/admin/users/<user_id>", methods=["DELETE"])
@token_required
@admin_required
def delete_user(current_user, user_id):
    admin_service.delete_user(user_id, current_user.id)
    current_app.logger.info(f"User {user_id} deleted by {current_user.email}")
    return api_response(True, "User deleted successfully", None)


@admin_bp.route("/api/admin/qr-codes", methods=["GET"])
@token_required
@admin_required
def list_qr_codes(current_user):
    return api_response(True, "QR codes fetched", [serialize_qr_code(q) for q in admin_service.list_qr_codes()])


@admin_bp.route("/api/admin/orders", methods=["GET"])
@token_required
@admin_required
def list_orders(current_user):
    return api_response(True, "Orders fetched", [serialize_order(o) for o in order_service.list_all_orders()])


@admin_bp.route("/api/admin/orders/<order_id>", methods=["PATCH"])
@token_required
@admin_required
def update_order(current_user, order_id):
    data = request.get_json(silent=True) or {}
    quantity = parse_quantity(data["quantity"], minimum=1) if "quantity" in data else None

    order = admin_service.update_order(
        order_id,
        quantity=quantity,
        shipping_address=data.get("shippingAddress"),
        status=data.get("status"),
        message=data.get("message"),
    )
    return api_response(True, "Order updated", serialize_order(order))


@admin_bp.route("/api/admin/stats", methods=["GET"])
@token_required
@admin_required
def platform_stats(current_user):
    return api_response(True, "Platform stats fetched", admin_service.get_platform_stats())
