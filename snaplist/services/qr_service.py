import datetime
import logging
import secrets
import string
from collections import Counter

from flask import current_app

from ..exceptions import ForbiddenError, NotFoundError, PlanLimitError, ValidationError
from ..extensions import db
from ..models.order import Order
from ..models.qr_code import QRCode, QRCodeScan, QRCodeUrlHistory
from ..utils.plan_checker import check_qr_limit
from ..utils.qr_generator import png_data_url, render_qr_png
from .redirect_service import invalidate_redirect_cache

logger = logging.getLogger(__name__)

SHORT_CODE_ALPHABET = string.ascii_letters + string.digits + "_-"
SHORT_CODE_LENGTH = 8

EDITABLE_FIELDS = ("name", "destination_url", "is_active", "custom_color", "custom_bg_color", "logo_url")

# timeRange values accepted by get_user_analytics, in days; None is all time
TIME_RANGES = {"7days": 7, "30days": 30, "90days": 90, "all": None}
DEFAULT_TIME_RANGE = "30days"
TOP_QR_CODES = 5


def generate_short_code() -> str:
    while True:
        code = "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))
        if not QRCode.query.filter_by(short_code=code).first():
            return code


def list_user_qr_codes(user_id: str) -> list[QRCode]:
    return QRCode.query.filter_by(user_id=user_id).order_by(QRCode.created_at.desc()).all()


def get_qr_code(qr_code_id: str, user_id: str) -> QRCode:
    """Fetch a QR code owned by ``user_id``; NotFoundError or ForbiddenError otherwise."""
    qr_code = db.session.get(QRCode, qr_code_id)
    if not qr_code:
        raise NotFoundError("QR code")
    if qr_code.user_id != user_id:
        raise ForbiddenError("Unauthorized")
    return qr_code


def create_qr_code(user, name: str, destination_url: str, **fields) -> QRCode:
    ok, msg = check_qr_limit(user)
    if not ok:
        raise PlanLimitError(msg)

    qr_code = QRCode(
        user_id=user.id,
        name=name,
        destination_url=destination_url,
        short_code=generate_short_code(),
        **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None},
    )
    db.session.add(qr_code)
    db.session.commit()
    logger.info(f"QR code {qr_code.short_code} created for user {user.id}")
    return qr_code


def update_qr_code(qr_code: QRCode, updates: dict) -> QRCode:
    """Apply ``updates``; a destination change is written to the URL history first."""
    new_url = updates.get("destination_url")
    if new_url and new_url != qr_code.destination_url:
        db.session.add(QRCodeUrlHistory(qr_code_id=qr_code.id, destination_url=qr_code.destination_url))

    for field in EDITABLE_FIELDS:
        if field in updates:
            setattr(qr_code, field, updates[field])
    qr_code.updated_at = datetime.datetime.utcnow()
    db.session.commit()

    invalidate_redirect_cache(qr_code.short_code)
    return qr_code


def delete_qr_code(qr_code: QRCode) -> None:
    # Orders keep a reference to the QR code they were printed from
    if Order.query.filter_by(qr_code_id=qr_code.id).first():
        raise ValidationError("QR code has orders and cannot be deleted")

    short_code = qr_code.short_code
    db.session.delete(qr_code)
    db.session.commit()
    invalidate_redirect_cache(short_code)


def get_url_history(qr_code: QRCode) -> list[QRCodeUrlHistory]:
    return (
        QRCodeUrlHistory.query
        .filter_by(qr_code_id=qr_code.id)
        .order_by(QRCodeUrlHistory.changed_at.desc())
        .all()
    )


def _summarize_scans(scans: list[QRCodeScan]) -> dict:
    return {
        "totalScans": len(scans),
        "uniqueVisitors": len({s.ip_address for s in scans}),
        "deviceBreakdown": dict(Counter(s.device_type or "Unknown" for s in scans)),
        "locationBreakdown": dict(Counter(s.country or "Unknown" for s in scans)),
        "browserBreakdown": dict(Counter(s.browser or "Unknown" for s in scans)),
    }


def get_qr_code_analytics(qr_code: QRCode) -> dict:
    scans = (
        QRCodeScan.query
        .filter_by(qr_code_id=qr_code.id)
        .order_by(QRCodeScan.scanned_at.desc())
        .all()
    )
    return _summarize_scans(scans)


def get_user_analytics(user_id: str, time_range: str | None = None) -> dict:
    """Scan totals across all of a user's QR codes within ``time_range`` (see TIME_RANGES)."""
    time_range = time_range or DEFAULT_TIME_RANGE
    if time_range not in TIME_RANGES:
        raise ValidationError(f"timeRange must be one of {', '.join(TIME_RANGES)}", field="timeRange")

    qr_codes = list_user_qr_codes(user_id)
    query = (
        QRCodeScan.query
        .join(QRCode, QRCodeScan.qr_code_id == QRCode.id)
        .filter(QRCode.user_id == user_id)
    )
    days = TIME_RANGES[time_range]
    if days is not None:
        query = query.filter(QRCodeScan.scanned_at >= datetime.datetime.utcnow() - datetime.timedelta(days=days))
    scans = query.order_by(QRCodeScan.scanned_at.asc()).all()

    per_code = Counter(s.qr_code_id for s in scans)
    top = sorted(qr_codes, key=lambda q: per_code[q.id], reverse=True)[:TOP_QR_CODES]

    analytics = _summarize_scans(scans)
    analytics.update({
        "timeRange": time_range,
        "totalQrCodes": len(qr_codes),
        "activeQrCodes": sum(1 for q in qr_codes if q.is_active),
        "scansByDay": dict(Counter(s.scanned_at.date().isoformat() for s in scans)),
        "topQrCodes": [
            {"id": q.id, "name": q.name, "shortCode": q.short_code, "scans": per_code[q.id]}
            for q in top if per_code[q.id]
        ],
    })
    return analytics


def tracking_url(qr_code: QRCode) -> str:
    base_url = current_app.config.get("APP_URL", "http://localhost:5000").rstrip("/")
    return f"{base_url}/r/{qr_code.short_code}"


def render_qr_png_data_url(qr_code: QRCode) -> str:
    png = render_qr_png(
        tracking_url(qr_code),
        color_dark=qr_code.custom_color or "#000000",
        color_light=qr_code.custom_bg_color or "#FFFFFF",
    )
    return png_data_url(png)
