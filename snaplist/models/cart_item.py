import datetime
import uuid
from ..extensions import db

PRODUCT_TYPES = ("sticker", "yard_sign")


class CartItem(db.Model):
    __tablename__ = "cart_items"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    qr_code_id = db.Column(db.String(36), db.ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False)
    product_type = db.Column(db.String(20), nullable=False)
    # "" means no size; never NULL so the unique constraint below can match it
    size = db.Column(db.String(20), nullable=False, default="")
    quantity = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("user_id", "qr_code_id", "product_type", "size", name="uq_cart_item_line"),
        db.CheckConstraint("quantity > 0", name="ck_cart_item_quantity_positive"),
    )

    def __repr__(self):
        return f"<CartItem {self.product_type} x{self.quantity} - User {self.user_id}>"
