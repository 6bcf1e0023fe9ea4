from decimal import Decimal
from unittest.mock import patch

import pytest

from snaplist.exceptions import NotFoundError, ValidationError
from snaplist.models import CartItem, Order, OrderStatusHistory
from snaplist.services import cart_service, order_service


@pytest.mark.parametrize("product_type,size,quantity,expected", [
    ("sticker", "small", 10, Decimal("5.00")),
    ("sticker", "medium", 3, Decimal("3.00")),
    ("sticker", "large", 2, Decimal("3.00")),
    ("sticker", None, 1, Decimal("1.50")),
    ("yard_sign", None, 2, Decimal("25.98")),
])
def test_calculate_price(product_type, size, quantity, expected):
    assert order_service.calculate_price(product_type, size, quantity) == expected


def test_calculate_price_unknown_product():
    with pytest.raises(ValidationError):
        order_service.calculate_price("mug", None, 1)


def _order(user, qr_code):
    return order_service.create_order(
        user_id=user.id,
        qr_code_id=qr_code.id,
        product_type="sticker",
        quantity=2,
        total=Decimal("2.00"),
        shipping_address="1 Main St",
        size="medium",
    )


def test_update_status_sends_email(user, qr_code):
    order = _order(user, qr_code)

    with patch.object(order_service, "send_order_status_email", return_value=True) as send:
        updated = order_service.update_order_status(order.id, "shipped")

    assert updated.status == "shipped"
    send.assert_called_once()
    email, order_number, status, name = send.call_args[0]
    assert email == user.email
    assert order_number == order.order_number
    assert status.value == "shipped"
    assert name == "Test User"

    statuses = [h.status for h in OrderStatusHistory.query.filter_by(order_id=order.id).all()]
    assert sorted(statuses) == ["pending", "shipped"]


def test_update_status_survives_email_failure(user, qr_code):
    order = _order(user, qr_code)

    with patch.object(order_service, "send_order_status_email", return_value=False):
        updated = order_service.update_order_status(order.id, "delivered")

    assert updated.status == "delivered"


def test_update_status_rejects_unknown_status(user, qr_code):
    order = _order(user, qr_code)

    with pytest.raises(ValidationError):
        order_service.update_order_status(order.id, "teleported")


def test_update_status_missing_order(app):
    with pytest.raises(NotFoundError):
        order_service.update_order_status("missing", "shipped")


def test_checkout_cart_creates_orders_and_clears_cart(user, qr_code, make_qr_code):
    sign_qr = make_qr_code(user, name="Yard")
    cart_service.add_to_cart(user.id, qr_code.id, "sticker", quantity=4, size="small")
    cart_service.add_to_cart(user.id, sign_qr.id, "yard_sign", quantity=1)

    orders = order_service.checkout_cart(user.id, "1 Main St", "pi_123")

    assert len(orders) == 2
    assert sorted(o.total for o in orders) == [Decimal("2.00"), Decimal("12.99")]
    assert all(o.stripe_payment_intent_id == "pi_123" for o in orders)
    assert CartItem.query.filter_by(user_id=user.id).count() == 0
    assert Order.query.filter_by(user_id=user.id).count() == 2


def test_checkout_empty_cart(user):
    with pytest.raises(ValidationError):
        order_service.checkout_cart(user.id, "1 Main St")
