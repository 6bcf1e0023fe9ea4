import datetime
import logging

from sqlalchemy import func

from ..exceptions import NotFoundError, ValidationError
from ..extensions import db
from ..models.membership import TIER_NAMES, UserMembership
from ..models.order import Order, OrderStatus
from ..models.qr_code import QRCode
from ..models.user import User
from . import order_service
from .redirect_service import invalidate_redirect_cache

logger = logging.getLogger(__name__)

USER_EDITABLE_FIELDS = ("first_name", "last_name", "company", "saved_address", "is_admin")


def list_users() -> list[tuple[User, UserMembership | None]]:
    """Every user, newest first, paired with their active membership."""
    users = User.query.order_by(User.created_at.desc()).all()
    memberships = {m.user_id: m for m in UserMembership.query.filter_by(is_active=True).all()}
    return [(user, memberships.get(user.id)) for user in users]


def list_qr_codes() -> list[QRCode]:
    return QRCode.query.order_by(QRCode.created_at.desc()).all()


def get_platform_stats() -> dict:
    month_start = datetime.datetime.utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    revenue = (
        db.session.query(func.coalesce(func.sum(Order.total), 0))
        .filter(Order.created_at >= month_start, Order.status != OrderStatus.CANCELLED.value)
        .scalar()
    )
    orders_by_status = dict(
        db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
    )

    return {
        "totalUsers": User.query.count(),
        "totalQrCodes": QRCode.query.count(),
        "totalScans": int(db.session.query(func.coalesce(func.sum(QRCode.scan_count), 0)).scalar()),
        "totalOrders": Order.query.count(),
        "revenueThisMonth": f"{revenue:.2f}",
        "ordersByStatus": {status.value: orders_by_status.get(status.value, 0) for status in OrderStatus},
    }


def _set_tier(user_id: str, tier_name: str) -> None:
    if tier_name not in TIER_NAMES:
        raise ValidationError(f"Unknown membership tier: {tier_name}", field="membershipTier")

    membership = UserMembership.query.filter_by(user_id=user_id, is_active=True).first()
    if membership:
        membership.tier_name = tier_name
    else:
        db.session.add(UserMembership(user_id=user_id, tier_name=tier_name, is_active=True))


def update_user(user_id: str, updates: dict, tier_name: str | None = None) -> User:
    """Apply profile ``updates`` and optionally move the user to ``tier_name``."""
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User")

    if tier_name is not None:
        _set_tier(user.id, tier_name)

    for field in USER_EDITABLE_FIELDS:
        if field in updates:
            setattr(user, field, updates[field])
    user.updated_at = datetime.datetime.utcnow()
    db.session.commit()

    logger.info(f"User {user.id} updated by admin")
    return user


def delete_user(user_id: str, acting_user_id: str) -> None:
    """Delete a user and everything they own. Admins cannot delete themselves."""
    if user_id == acting_user_id:
        raise ValidationError("You cannot delete your own account")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User")

    short_codes = [q.short_code for q in user.qr_codes]
    db.session.delete(user)
    db.session.commit()

    for short_code in short_codes:
        invalidate_redirect_cache(short_code)
    logger.info(f"User {user_id} deleted with {len(short_codes)} QR code(s)")


def update_order(order_id: str, quantity: int | None = None, shipping_address: str | None = None,
                 status: str | None = None, message: str | None = None) -> Order:
    """
    Edit an order. A quantity change reprices it.

    A status change goes through order_service.update_order_status so the
    history row and customer email follow; resending the current status
    sends nothing.
    """
    order = db.session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order")

    if status is not None:
        try:
            status = OrderStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid order status: {status}", field="status")

    if quantity is not None and quantity != order.quantity:
        order.quantity = quantity
        order.total = order_service.calculate_price(order.product_type, order.size, quantity)
    if shipping_address:
        order.shipping_address = shipping_address
    order.updated_at = datetime.datetime.utcnow()
    db.session.commit()

    if status is not None and status.value != order.status:
        order = order_service.update_order_status(order.id, status, message)

    return order
