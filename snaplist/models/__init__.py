from .user import User
from .membership import MembershipTier, UserMembership
from .qr_code import QRCode, QRCodeScan, QRCodeUrlHistory
from .cart_item import CartItem
from .order import Order, OrderStatus, OrderStatusHistory

__all__ = [
    "User",
    "MembershipTier",
    "UserMembership",
    "QRCode",
    "QRCodeScan",
    "QRCodeUrlHistory",
    "CartItem",
    "Order",
    "OrderStatus",
    "OrderStatusHistory",
]
