from flask import Blueprint, request

from ..exceptions import ValidationError
from ..models.cart_item import PRODUCT_TYPES
from ..routes.auth_routes import token_required
from ..schemas.cart_schema import serialize_cart_item
from ..services import cart_service
from ..services.qr_service import get_qr_code
from ..utils.response import api_response
from ..utils.validation import parse_quantity

cart_bp = Blueprint("cart", __name__)


@cart_bp.route("/api/cart", methods=["GET"])
@token_required
def list_cart(current_user):
    items = cart_service.get_user_cart_items(current_user.id)
    return api_response(True, "Cart fetched", [serialize_cart_item(i, include_qr_code=True) for i in items])


@cart_bp.route("/api/cart", methods=["POST"])
@token_required
def add_to_cart(current_user):
    data = request.get_json(silent=True) or {}

    qr_code_id = data.get("qrCodeId")
    product_type = data.get("productType")
    if not qr_code_id:
        raise ValidationError("qrCodeId is required", field="qrCodeId")
    if product_type not in PRODUCT_TYPES:
        raise ValidationError(f"productType must be one of {', '.join(PRODUCT_TYPES)}", field="productType")
    quantity = parse_quantity(data.get("quantity", 1), minimum=1)

    # Ownership check; raises 404/403
    get_qr_code(qr_code_id, current_user.id)

    item = cart_service.add_to_cart(
        user_id=current_user.id,
        qr_code_id=qr_code_id,
        product_type=product_type,
        quantity=quantity,
        size=data.get("size"),
    )
    return api_response(True, "Added to cart", serialize_cart_item(item))


@cart_bp.route("/api/cart/<item_id>", methods=["PUT"])
@token_required
def update_cart_item(current_user, item_id):
    data = request.get_json(silent=True) or {}
    quantity = parse_quantity(data.get("quantity"))

    item = cart_service.update_cart_item_quantity(item_id, current_user.id, quantity)
    return api_response(True, "Cart updated", serialize_cart_item(item) if item else None)


@cart_bp.route("/api/cart/<item_id>", methods=["DELETE"])
@token_required
def remove_cart_item(current_user, item_id):
    cart_service.remove_from_cart(item_id, current_user.id)
    return api_response(True, "Removed from cart", None)


@cart_bp.route("/api/cart", methods=["DELETE"])
@token_required
def clear_cart(current_user):
    cart_service.clear_cart(current_user.id)
    return api_response(True, "Cart cleared", None)


@cart_bp.route("/api/cart/count", methods=["GET"])
@token_required
def cart_count(current_user):
    return api_response(True, "Cart count fetched", {"count": cart_service.get_cart_item_count(current_user.id)})
