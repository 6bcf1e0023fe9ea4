import datetime
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models.cart_item import CartItem

logger = logging.getLogger(__name__)

# Attempts for the add-to-cart upsert when a concurrent insert wins the race
ADD_TO_CART_ATTEMPTS = 3


def _normalize_size(size: str | None) -> str:
    return size or ""


def get_user_cart_items(user_id: str) -> list[CartItem]:
    """All cart items for a user with their QR codes loaded, newest first."""
    return (
        CartItem.query
        .options(joinedload(CartItem.qr_code))
        .filter_by(user_id=user_id)
        .order_by(CartItem.created_at.desc())
        .all()
    )


def _find_line(user_id: str, qr_code_id: str, product_type: str, size: str) -> CartItem | None:
    return CartItem.query.filter_by(
        user_id=user_id,
        qr_code_id=qr_code_id,
        product_type=product_type,
        size=size,
    ).first()


def add_to_cart(user_id: str, qr_code_id: str, product_type: str, quantity: int = 1,
                size: str | None = None) -> CartItem:
    """
    Add a line to the user's cart, merging with an existing line.

    Lines are unique on (user, qr code, product type, size); adding an existing
    line increments its quantity instead of inserting a second row. A missing
    size is the same line as an empty size. If a concurrent request inserts
    the same line first, the unique constraint rejects our insert and we retry
    as an increment.
    """
    size = _normalize_size(size)

    for attempt in range(1, ADD_TO_CART_ATTEMPTS + 1):
        existing = _find_line(user_id, qr_code_id, product_type, size)
        if existing:
            existing.quantity = CartItem.quantity + quantity
            existing.updated_at = datetime.datetime.utcnow()
            db.session.commit()
            db.session.refresh(existing)
            return existing

        item = CartItem(
            user_id=user_id,
            qr_code_id=qr_code_id,
            product_type=product_type,
            size=size,
            quantity=quantity,
        )
        db.session.add(item)
        try:
            db.session.commit()
            return item
        except IntegrityError:
            db.session.rollback()
            logger.info(f"Cart line for user {user_id} inserted concurrently, retrying ({attempt})")

    raise RuntimeError(f"Could not add item to cart for user {user_id}")


def update_cart_item_quantity(item_id: str, user_id: str, quantity: int) -> CartItem | None:
    """Set a line's quantity; zero or less removes it. Returns None when nothing matched or it was removed."""
    if quantity <= 0:
        remove_from_cart(item_id, user_id)
        return None

    item = CartItem.query.filter_by(id=item_id, user_id=user_id).first()
    if not item:
        return None

    item.quantity = quantity
    item.updated_at = datetime.datetime.utcnow()
    db.session.commit()
    return item


def remove_from_cart(item_id: str, user_id: str) -> None:
    CartItem.query.filter_by(id=item_id, user_id=user_id).delete(synchronize_session=False)
    db.session.commit()


def clear_cart(user_id: str) -> None:
    CartItem.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.commit()


def get_cart_item_count(user_id: str) -> int:
    total = (
        db.session.query(func.coalesce(func.sum(CartItem.quantity), 0))
        .filter(CartItem.user_id == user_id)
        .scalar()
    )
    return int(total)
