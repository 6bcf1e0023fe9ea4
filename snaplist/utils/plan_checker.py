# utils/plan_checker.py
from ..models.qr_code import QRCode
from ..services.membership_service import get_user_tier


def check_qr_limit(user):
    """
    Tier quota check for creating another QR code.
    A tier without max_qr_codes is unlimited.
    """
    tier = get_user_tier(user.id)
    if tier is None or tier.max_qr_codes is None:
        return True, None

    qr_count = QRCode.query.filter_by(user_id=user.id).count()
    if qr_count >= tier.max_qr_codes:
        return False, f"You reached your QR code limit ({tier.max_qr_codes}) on the {tier.display_name} plan."

    return True, None


def tier_allows(user, feature: str) -> bool:
    """Whether the user's tier has a feature flag such as "has_analytics"."""
    tier = get_user_tier(user.id)
    return bool(tier and getattr(tier, feature, False))
