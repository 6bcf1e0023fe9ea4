from ._common import iso


def serialize_qr_code(qr_code) -> dict:
    return {
        "id": qr_code.id,
        "userId": qr_code.user_id,
        "name": qr_code.name,
        "shortCode": qr_code.short_code,
        "destinationUrl": qr_code.destination_url,
        "isActive": qr_code.is_active,
        "customColor": qr_code.custom_color,
        "customBgColor": qr_code.custom_bg_color,
        "logoUrl": qr_code.logo_url,
        "scanCount": qr_code.scan_count,
        "createdAt": iso(qr_code.created_at),
        "updatedAt": iso(qr_code.updated_at),
    }


def serialize_url_history(entry) -> dict:
    return {
        "id": entry.id,
        "qrCodeId": entry.qr_code_id,
        "destinationUrl": entry.destination_url,
        "changedAt": iso(entry.changed_at),
    }
