import datetime
import logging
from decimal import Decimal, ROUND_HALF_UP

from ..exceptions import NotFoundError, ValidationError
from ..extensions import db
from ..models.cart_item import PRODUCT_TYPES, CartItem
from ..models.order import Order, OrderStatus, OrderStatusHistory
from ..models.user import User
from .email_service import send_order_status_email

logger = logging.getLogger(__name__)

STICKER_PRICES = {
    "small": Decimal("0.50"),
    "medium": Decimal("1.00"),
}
STICKER_DEFAULT_PRICE = Decimal("1.50")
YARD_SIGN_PRICE = Decimal("12.99")


def unit_price(product_type: str, size: str | None) -> Decimal:
    if product_type == "sticker":
        return STICKER_PRICES.get(size or "", STICKER_DEFAULT_PRICE)
    if product_type == "yard_sign":
        return YARD_SIGN_PRICE
    raise ValidationError(f"Unknown product type: {product_type}", field="productType")


def calculate_price(product_type: str, size: str | None, quantity: int) -> Decimal:
    total = unit_price(product_type, size) * quantity
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def create_order(user_id: str, qr_code_id: str, product_type: str, quantity: int, total,
                 shipping_address: str, size: str | None = None,
                 stripe_payment_intent_id: str | None = None, commit: bool = True) -> Order:
    if product_type not in PRODUCT_TYPES:
        raise ValidationError(f"Unknown product type: {product_type}", field="productType")

    order = Order(
        user_id=user_id,
        qr_code_id=qr_code_id,
        product_type=product_type,
        quantity=quantity,
        size=size or None,
        total=Decimal(str(total)),
        shipping_address=shipping_address,
        stripe_payment_intent_id=stripe_payment_intent_id,
        status=OrderStatus.PENDING.value,
    )
    db.session.add(order)
    db.session.flush()
    db.session.add(OrderStatusHistory(order_id=order.id, status=order.status, message="Order placed"))
    if commit:
        db.session.commit()
    return order


def list_user_orders(user_id: str) -> list[Order]:
    return Order.query.filter_by(user_id=user_id).order_by(Order.created_at.desc()).all()


def list_all_orders() -> list[Order]:
    return Order.query.order_by(Order.created_at.desc()).all()


def checkout_cart(user_id: str, shipping_address: str, stripe_payment_intent_id: str | None = None) -> list[Order]:
    """Turn every cart line into an order and empty the cart, all in one transaction."""
    items = CartItem.query.filter_by(user_id=user_id).order_by(CartItem.created_at.asc()).all()
    if not items:
        raise ValidationError("Cart is empty")

    orders = []
    try:
        for item in items:
            orders.append(create_order(
                user_id=user_id,
                qr_code_id=item.qr_code_id,
                product_type=item.product_type,
                quantity=item.quantity,
                size=item.size,
                total=calculate_price(item.product_type, item.size, item.quantity),
                shipping_address=shipping_address,
                stripe_payment_intent_id=stripe_payment_intent_id,
                commit=False,
            ))
            db.session.delete(item)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Checked out {len(orders)} cart item(s) for user {user_id}")
    return orders


def update_order_status(order_id: str, status, message: str | None = None) -> Order:
    """
    Move an order to ``status`` and notify the customer.

    The email is best effort: a failed send is logged and the status change stands.
    """
    try:
        status = OrderStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid order status: {status}", field="status")

    order = db.session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order")

    order.status = status.value
    order.updated_at = datetime.datetime.utcnow()
    db.session.add(OrderStatusHistory(order_id=order.id, status=status.value, message=message))
    db.session.commit()

    user = db.session.get(User, order.user_id)
    if user:
        sent = send_order_status_email(user.email, order.order_number, status, user.display_name)
        if not sent:
            logger.warning(f"Order status email for order {order.id} was not delivered")

    return order
