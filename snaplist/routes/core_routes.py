from flask import Blueprint, request

from ..services.email_service import send_newsletter_confirmation
from ..utils.response import api_response

core_bp = Blueprint("core", __name__)


@core_bp.route("/")
def root():
    return api_response(True, "SnapList API. Use the web frontend for UI.", None)


@core_bp.route("/health")
def health():
    return {"status": "ok"}, 200


@core_bp.route("/api/newsletter/subscribe", methods=["POST"])
def newsletter_subscribe():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    if not email or "@" not in email:
        return api_response(False, "A valid email is required", None, 400)

    sent = send_newsletter_confirmation(email)
    return api_response(True, "Subscribed to newsletter", {"confirmationSent": sent})
