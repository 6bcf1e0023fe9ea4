from ._common import iso
from .qr_schema import serialize_qr_code


def serialize_cart_item(item, include_qr_code: bool = False) -> dict:
    data = {
        "id": item.id,
        "userId": item.user_id,
        "qrCodeId": item.qr_code_id,
        "productType": item.product_type,
        "size": item.size or None,
        "quantity": item.quantity,
        "createdAt": iso(item.created_at),
        "updatedAt": iso(item.updated_at),
    }
    if include_qr_code:
        data["qrCode"] = serialize_qr_code(item.qr_code) if item.qr_code else None
    return data
