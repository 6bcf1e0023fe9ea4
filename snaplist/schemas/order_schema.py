from ._common import iso, money


def serialize_order(order) -> dict:
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "userId": order.user_id,
        "qrCodeId": order.qr_code_id,
        "productType": order.product_type,
        "quantity": order.quantity,
        "size": order.size,
        "total": money(order.total),
        "status": order.status,
        "stripePaymentIntentId": order.stripe_payment_intent_id,
        "shippingAddress": order.shipping_address,
        "createdAt": iso(order.created_at),
        "updatedAt": iso(order.updated_at),
    }
