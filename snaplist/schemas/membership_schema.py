from ._common import money


def serialize_tier(tier) -> dict:
    return {
        "id": tier.id,
        "name": tier.name,
        "displayName": tier.display_name,
        "price": money(tier.price),
        "maxQrCodes": tier.max_qr_codes,
        "hasAnalytics": tier.has_analytics,
        "hasCustomBranding": tier.has_custom_branding,
        "hasApiAccess": tier.has_api_access,
        "hasWhiteLabel": tier.has_white_label,
        "stripePriceId": tier.stripe_price_id,
    }
