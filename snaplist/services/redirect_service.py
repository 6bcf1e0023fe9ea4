import datetime
import json
import logging

import redis
import requests
from flask import current_app
from user_agents import parse

from .. import extensions
from ..extensions import db
from ..models.qr_code import QRCode, QRCodeScan

logger = logging.getLogger(__name__)

BOT_KEYWORDS = [
    "bot", "crawler", "spider", "preview", "fetch",
    "safelinks", "slackbot", "discordbot", "whatsapp", "facebookexternalhit",
    "twitterbot", "linkexpander", "google-read-aloud",
]


def _cache_key(short_code: str) -> str:
    return f"redirect:{short_code}"


def serialize_redirect_info(qr_code: QRCode) -> dict:
    return {
        "id": qr_code.id,
        "name": qr_code.name,
        "shortCode": qr_code.short_code,
        "destinationUrl": qr_code.destination_url,
        "customColor": qr_code.custom_color,
        "customBgColor": qr_code.custom_bg_color,
        "logoUrl": qr_code.logo_url,
    }


def invalidate_redirect_cache(short_code: str) -> None:
    if not extensions.redis_client:
        return
    try:
        extensions.redis_client.delete(_cache_key(short_code))
    except redis.RedisError as e:
        logger.warning(f"Redis delete failed for {short_code}: {e}")


def get_active_qr_code(short_code: str) -> QRCode | None:
    qr_code = QRCode.query.filter_by(short_code=short_code).first()
    if not qr_code or not qr_code.is_active:
        return None
    return qr_code


def get_redirect_info(short_code: str) -> dict | None:
    """Destination and display metadata for a short code, or None if unknown or inactive."""
    client = extensions.redis_client

    if client:
        try:
            cached = client.get(_cache_key(short_code))
            if cached:
                return json.loads(cached)
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Redis GET failed for {short_code}: {e}")

    qr_code = get_active_qr_code(short_code)
    if not qr_code:
        return None

    info = serialize_redirect_info(qr_code)

    if client:
        try:
            ttl = int(current_app.config.get("REDIS_TTL", 3600))
            client.setex(_cache_key(short_code), ttl, json.dumps(info))
        except redis.RedisError as e:
            logger.warning(f"Redis SET failed for {short_code}: {e}")

    return info


def parse_device_info(user_agent: str) -> dict:
    ua = parse(user_agent or "")
    if ua.is_tablet:
        device_type = "tablet"
    elif ua.is_mobile:
        device_type = "mobile"
    else:
        device_type = "desktop"

    return {
        "device_type": device_type,
        "browser": ua.browser.family or "Unknown",
        "operating_system": ua.os.family or "Unknown",
    }


def is_bot(user_agent: str) -> bool:
    ua = (user_agent or "").lower()
    return any(keyword in ua for keyword in BOT_KEYWORDS)


def get_location_from_ip(ip: str | None) -> dict:
    if not current_app.config.get("GEOIP_LOOKUP") or not ip:
        return {"country": None, "city": None}

    try:
        resp = requests.get(f"https://ipwho.is/{ip}", timeout=3)
        data = resp.json()
        if data.get("success"):
            return {"country": data.get("country"), "city": data.get("city")}
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"GeoIP lookup failed for {ip}: {e}")

    return {"country": None, "city": None}


def record_scan(qr_code: QRCode, user_agent: str, ip_address: str | None) -> QRCodeScan | None:
    """
    Store a scan and bump the QR code's counter.

    Bots are not recorded. A database failure is rolled back and logged so
    the caller can still redirect.
    """
    if is_bot(user_agent):
        logger.info(f"Bot scan skipped for {qr_code.short_code}: {user_agent}")
        return None

    location = get_location_from_ip(ip_address)

    try:
        scan = QRCodeScan(
            qr_code_id=qr_code.id,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:300],
            country=location["country"],
            city=location["city"],
            **parse_device_info(user_agent),
        )
        db.session.add(scan)
        QRCode.query.filter_by(id=qr_code.id).update(
            {
                QRCode.scan_count: QRCode.scan_count + 1,
                QRCode.updated_at: datetime.datetime.utcnow(),
            },
            synchronize_session=False,
        )
        db.session.commit()
        return scan
    except Exception as e:
        db.session.rollback()
        logger.error(f"Scan tracking failed for {qr_code.short_code}: {e}")
        return None
