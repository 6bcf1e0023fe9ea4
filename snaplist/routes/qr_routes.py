from flask import Blueprint, request

from ..exceptions import ForbiddenError, ValidationError
from ..routes.auth_routes import token_required
from ..schemas.qr_schema import serialize_qr_code, serialize_url_history
from ..services import qr_service
from ..utils.plan_checker import tier_allows
from ..utils.response import api_response
from ..utils.security import normalize_destination_url

qr_bp = Blueprint("qr", __name__)

# request key -> model attribute
FIELD_MAP = {
    "name": "name",
    "destinationUrl": "destination_url",
    "isActive": "is_active",
    "customColor": "custom_color",
    "customBgColor": "custom_bg_color",
    "logoUrl": "logo_url",
}


def _read_fields(data: dict) -> dict:
    fields = {FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP}
    if "destination_url" in fields:
        fields["destination_url"] = normalize_destination_url(fields["destination_url"])
    if "name" in fields:
        fields["name"] = (fields["name"] or "").strip()
        if not fields["name"]:
            raise ValidationError("name is required", field="name")
    return fields


@qr_bp.route("/api/qr-codes", methods=["GET"])
@token_required
def list_qr_codes(current_user):
    qr_codes = qr_service.list_user_qr_codes(current_user.id)
    return api_response(True, "QR codes fetched", [serialize_qr_code(q) for q in qr_codes])


@qr_bp.route("/api/qr-codes", methods=["POST"])
@token_required
def create_qr_code(current_user):
    data = request.get_json(silent=True) or {}
    if "name" not in data:
        raise ValidationError("name is required", field="name")
    if "destinationUrl" not in data:
        raise ValidationError("destinationUrl is required", field="destinationUrl")

    fields = _read_fields(data)
    qr_code = qr_service.create_qr_code(
        current_user,
        name=fields.pop("name"),
        destination_url=fields.pop("destination_url"),
        **fields,
    )
    return api_response(True, "QR code created", serialize_qr_code(qr_code), 201)


@qr_bp.route("/api/qr-codes/<qr_code_id>", methods=["GET"])
@token_required
def get_qr_code(current_user, qr_code_id):
    qr_code = qr_service.get_qr_code(qr_code_id, current_user.id)
    return api_response(True, "QR code fetched", serialize_qr_code(qr_code))


@qr_bp.route("/api/qr-codes/<qr_code_id>", methods=["PUT"])
@token_required
def update_qr_code(current_user, qr_code_id):
    qr_code = qr_service.get_qr_code(qr_code_id, current_user.id)
    updates = _read_fields(request.get_json(silent=True) or {})
    qr_code = qr_service.update_qr_code(qr_code, updates)
    return api_response(True, "QR code updated", serialize_qr_code(qr_code))


@qr_bp.route("/api/qr-codes/<qr_code_id>", methods=["DELETE"])
@token_required
def delete_qr_code(current_user, qr_code_id):
    qr_code = qr_service.get_qr_code(qr_code_id, current_user.id)
    qr_service.delete_qr_code(qr_code)
    return api_response(True, "QR code deleted successfully", None)


@qr_bp.route("/api/qr-codes/<qr_code_id>/analytics", methods=["GET"])
@token_required
def qr_code_analytics(current_user, qr_code_id):
    qr_code = qr_service.get_qr_code(qr_code_id, current_user.id)
    if not tier_allows(current_user, "has_analytics"):
        raise ForbiddenError("Analytics are not available on your plan.")
    return api_response(True, "Analytics fetched", qr_service.get_qr_code_analytics(qr_code))


@qr_bp.route("/api/qr-codes/<qr_code_id>/url-history", methods=["GET"])
@token_required
def qr_code_url_history(current_user, qr_code_id):
    qr_code = qr_service.get_qr_code(qr_code_id, current_user.id)
    history = qr_service.get_url_history(qr_code)
    return api_response(True, "URL history fetched", [serialize_url_history(h) for h in history])


@qr_bp.route("/api/qr-codes/<qr_code_id>/download", methods=["GET"])
@token_required
def download_qr_code(current_user, qr_code_id):
    qr_code = qr_service.get_qr_code(qr_code_id, current_user.id)
    return api_response(True, "QR code rendered", {"dataUrl": qr_service.render_qr_png_data_url(qr_code)})


@qr_bp.route("/api/analytics", methods=["GET"])
@token_required
def user_analytics(current_user):
    if not tier_allows(current_user, "has_analytics"):
        raise ForbiddenError("Analytics are not available on your plan.")
    analytics = qr_service.get_user_analytics(current_user.id, request.args.get("timeRange"))
    return api_response(True, "Analytics fetched", analytics)
