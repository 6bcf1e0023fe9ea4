import logging
from decimal import Decimal

from flask import current_app

from ..extensions import db
from ..models.membership import MembershipTier

logger = logging.getLogger(__name__)


def tier_definitions() -> list[dict]:
    """The fixed FREE / STANDARD / PRO tiers, with billing price ids taken from config."""
    config = current_app.config
    return [
        {
            "name": "FREE",
            "display_name": "Free",
            "price": Decimal("0.00"),
            "max_qr_codes": 5,
            "has_analytics": False,
            "has_custom_branding": False,
            "has_api_access": False,
            "has_white_label": False,
            "stripe_price_id": None,
        },
        {
            "name": "STANDARD",
            "display_name": "Standard",
            "price": Decimal("19.00"),
            "max_qr_codes": 50,
            "has_analytics": True,
            "has_custom_branding": True,
            "has_api_access": False,
            "has_white_label": False,
            "stripe_price_id": config.get("STRIPE_STANDARD_PRICE_ID"),
        },
        {
            "name": "PRO",
            "display_name": "Pro",
            "price": Decimal("49.00"),
            "max_qr_codes": None,  # unlimited
            "has_analytics": True,
            "has_custom_branding": True,
            "has_api_access": True,
            "has_white_label": True,
            "stripe_price_id": config.get("STRIPE_PRO_PRICE_ID"),
        },
    ]


def seed_membership_tiers(definitions: list[dict] | None = None) -> dict:
    """
    Insert or refresh the membership tiers, keyed by name.

    A tier that fails is rolled back and logged; the others are still seeded.
    Returns the tier names grouped under "created", "updated" and "failed".
    """
    logger.info("Seeding membership tiers...")
    summary = {"created": [], "updated": [], "failed": []}

    for tier in definitions or tier_definitions():
        name = tier["name"]
        try:
            existing = MembershipTier.query.filter_by(name=name).first()
            if existing is None:
                db.session.add(MembershipTier(**tier))
                db.session.commit()
                summary["created"].append(name)
                logger.info(f"Created {name} tier")
            else:
                for field, value in tier.items():
                    if field != "name":
                        setattr(existing, field, value)
                db.session.commit()
                summary["updated"].append(name)
                logger.info(f"Updated {name} tier")
        except Exception as e:
            db.session.rollback()
            summary["failed"].append(name)
            logger.error(f"Error seeding {name} tier: {e}")

    logger.info(
        f"Membership tiers seeded: {len(summary['created'])} created, "
        f"{len(summary['updated'])} updated, {len(summary['failed'])} failed"
    )
    return summary
