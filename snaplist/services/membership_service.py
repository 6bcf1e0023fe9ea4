from ..extensions import db
from ..models.membership import MembershipTier, UserMembership


def get_membership_tiers() -> list[MembershipTier]:
    return MembershipTier.query.order_by(MembershipTier.price.asc()).all()


def get_user_membership(user_id: str) -> UserMembership | None:
    return UserMembership.query.filter_by(user_id=user_id, is_active=True).first()


def get_user_tier(user_id: str) -> MembershipTier | None:
    """The tier of the user's active membership, falling back to FREE."""
    membership = get_user_membership(user_id)
    tier_name = membership.tier_name if membership else "FREE"
    return MembershipTier.query.filter_by(name=tier_name).first()


def create_default_membership(user_id: str) -> UserMembership:
    membership = UserMembership(user_id=user_id, tier_name="FREE", is_active=True, expires_at=None)
    db.session.add(membership)
    db.session.commit()
    return membership
