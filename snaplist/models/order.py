import datetime
import enum
import uuid
from ..extensions import db


class OrderStatus(str, enum.Enum):
    """Order lifecycle states, each carrying its email badge colour and customer message."""

    PENDING = ("pending", "#FFA500", "Your order has been received and is pending processing.")
    PROCESSING = ("processing", "#007BFF", "Your order is being prepared.")
    SHIPPED = ("shipped", "#6F42C1", "Your order has been shipped and is on its way!")
    DELIVERED = ("delivered", "#28A745", "Your order has been delivered. Enjoy!")
    CANCELLED = ("cancelled", "#DC3545", "Your order has been cancelled.")

    def __new__(cls, value, color, message):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.color = color
        obj.message = message
        return obj

    @property
    def label(self) -> str:
        return self.value.capitalize()


ORDER_STATUSES = tuple(status.value for status in OrderStatus)


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    qr_code_id = db.Column(db.String(36), db.ForeignKey("qr_codes.id"), nullable=False)
    product_type = db.Column(db.String(20), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    size = db.Column(db.String(20))
    total = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(20), default="pending", nullable=False)
    stripe_payment_intent_id = db.Column(db.String(255))
    shipping_address = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)

    qr_code = db.relationship("QRCode")
    status_history = db.relationship(
        "OrderStatusHistory",
        backref="order",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.created_at",
    )

    @property
    def order_number(self) -> str:
        return self.id.split("-")[0].upper()

    def __repr__(self):
        return f"<Order {self.id} - {self.status}>"


class OrderStatusHistory(db.Model):
    __tablename__ = "order_status_history"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = db.Column(db.String(36), db.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False)
    message = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
