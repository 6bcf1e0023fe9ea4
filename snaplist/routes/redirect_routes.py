from flask import Blueprint, redirect, request

from ..services import redirect_service
from ..utils.response import api_response

redirect_bp = Blueprint("redirect", __name__)


@redirect_bp.route("/api/redirect-info/<short_code>")
def redirect_info(short_code):
    info = redirect_service.get_redirect_info(short_code)
    if not info:
        return api_response(False, "QR code not found or inactive", None, 404)
    return api_response(True, "Redirect info fetched", info)


@redirect_bp.route("/r/<short_code>")
def tracked_redirect(short_code):
    qr_code = redirect_service.get_active_qr_code(short_code)
    if not qr_code:
        return api_response(False, "QR code not found or inactive", None, 404)

    # remote_addr is the trusted client hop resolved by ProxyFix
    redirect_service.record_scan(qr_code, request.headers.get("User-Agent", ""), request.remote_addr)
    return redirect(qr_code.destination_url, code=302)
