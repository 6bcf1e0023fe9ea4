from flask import Blueprint

from ..routes.auth_routes import token_required
from ..schemas.membership_schema import serialize_tier
from ..schemas.user_schema import serialize_membership
from ..services.membership_service import get_membership_tiers, get_user_membership, get_user_tier
from ..utils.response import api_response

subscription_bp = Blueprint("subscription", __name__)


@subscription_bp.route("/tiers", methods=["GET"])
def list_tiers():
    return api_response(True, "Membership tiers fetched", [serialize_tier(t) for t in get_membership_tiers()])


@subscription_bp.route("/me", methods=["GET"])
@token_required
def my_subscription(current_user):
    tier = get_user_tier(current_user.id)
    return api_response(True, "Subscription status fetched", {
        "membership": serialize_membership(get_user_membership(current_user.id)),
        "tier": serialize_tier(tier) if tier else None,
    })
