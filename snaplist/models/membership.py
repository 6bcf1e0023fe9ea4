import datetime
import uuid
from ..extensions import db

TIER_NAMES = ("FREE", "STANDARD", "PRO")


class MembershipTier(db.Model):
    __tablename__ = "membership_tiers"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(20), nullable=False, unique=True)  # FREE, STANDARD, PRO
    display_name = db.Column(db.String(100), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    # NULL means unlimited
    max_qr_codes = db.Column(db.Integer, nullable=True)

    # Features
    has_analytics = db.Column(db.Boolean, default=False)
    has_custom_branding = db.Column(db.Boolean, default=False)
    has_api_access = db.Column(db.Boolean, default=False)
    has_white_label = db.Column(db.Boolean, default=False)

    stripe_price_id = db.Column(db.String(255), nullable=True)

    def __repr__(self):
        return f"<MembershipTier {self.name}>"


class UserMembership(db.Model):
    __tablename__ = "user_memberships"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tier_name = db.Column(db.String(20), nullable=False, default="FREE")
    is_active = db.Column(db.Boolean, default=True)
    expires_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UserMembership {self.user_id} - {self.tier_name}>"
