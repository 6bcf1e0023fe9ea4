from flask import Blueprint, current_app, request

from ..exceptions import ValidationError
from ..routes.auth_routes import admin_required, token_required
from ..schemas.order_schema import serialize_order
from ..services import order_service
from ..services.qr_service import get_qr_code
from ..utils.response import api_response
from ..utils.validation import parse_quantity

order_bp = Blueprint("order", __name__)


def _shipping_address(data: dict) -> str:
    address = data.get("shippingAddress")
    if not address:
        raise ValidationError("shippingAddress is required", field="shippingAddress")
    return address


@order_bp.route("/api/orders/calculate-price", methods=["POST"])
@token_required
def calculate_price(current_user):
    data = request.get_json(silent=True) or {}
    quantity = parse_quantity(data.get("quantity"), minimum=1)
    total = order_service.calculate_price(data.get("productType"), data.get("size"), quantity)
    return api_response(True, "Price calculated", {"total": f"{total:.2f}"})


@order_bp.route("/api/orders", methods=["POST"])
@token_required
def create_order(current_user):
    data = request.get_json(silent=True) or {}

    qr_code_id = data.get("qrCodeId")
    if not qr_code_id:
        raise ValidationError("qrCodeId is required", field="qrCodeId")
    get_qr_code(qr_code_id, current_user.id)

    quantity = parse_quantity(data.get("quantity"), minimum=1)
    total = order_service.calculate_price(data.get("productType"), data.get("size"), quantity)

    order = order_service.create_order(
        user_id=current_user.id,
        qr_code_id=qr_code_id,
        product_type=data.get("productType"),
        quantity=quantity,
        size=data.get("size"),
        total=total,
        shipping_address=_shipping_address(data),
        stripe_payment_intent_id=data.get("stripePaymentIntentId"),
    )
    return api_response(True, "Order created", serialize_order(order), 201)


@order_bp.route("/api/orders/checkout", methods=["POST"])
@token_required
def checkout(current_user):
    data = request.get_json(silent=True) or {}
    orders = order_service.checkout_cart(
        current_user.id,
        _shipping_address(data),
        stripe_payment_intent_id=data.get("stripePaymentIntentId"),
    )
    return api_response(True, "Cart checked out", [serialize_order(o) for o in orders], 201)


@order_bp.route("/api/orders", methods=["GET"])
@token_required
def list_orders(current_user):
    orders = order_service.list_user_orders(current_user.id)
    return api_response(True, "Orders fetched", [serialize_order(o) for o in orders])


@order_bp.route("/api/orders/<order_id>/status", methods=["PUT"])
@token_required
@admin_required
def update_order_status(current_user, order_id):
    data = request.get_json(silent=True) or {}
    order = order_service.update_order_status(order_id, data.get("status"), data.get("message"))
    current_app.logger.info(f"Order {order.id} set to {order.status} by {current_user.email}")
    return api_response(True, "Order status updated", serialize_order(order))

