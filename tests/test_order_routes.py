def test_create_and_list_orders(client, user, qr_code, auth_headers):
    headers = auth_headers(user)

    resp = client.post("/api/orders", json={
        "qrCodeId": qr_code.id,
        "productType": "sticker",
        "size": "small",
        "quantity": 10,
        "shippingAddress": "1 Main St",
    }, headers=headers)

    assert resp.status_code == 201
    assert resp.get_json()["data"]["total"] == "5.00"
    assert resp.get_json()["data"]["status"] == "pending"

    orders = client.get("/api/orders", headers=headers).get_json()["data"]
    assert len(orders) == 1


def test_calculate_price_endpoint(client, user, auth_headers):
    resp = client.post(
        "/api/orders/calculate-price",
        json={"productType": "yard_sign", "quantity": 2},
        headers=auth_headers(user),
    )

    assert resp.get_json()["data"]["total"] == "25.98"


def test_status_update_requires_admin(client, user, auth_headers):
    resp = client.put("/api/orders/any/status", json={"status": "shipped"}, headers=auth_headers(user))

    assert resp.status_code == 403


def test_admin_updates_status_and_customer_is_emailed(client, make_user, qr_code, user, auth_headers, smtp):
    admin = make_user(is_admin=True)
    order = client.post("/api/orders", json={
        "qrCodeId": qr_code.id,
        "productType": "yard_sign",
        "quantity": 1,
        "shippingAddress": "1 Main St",
    }, headers=auth_headers(user)).get_json()["data"]

    resp = client.put(f"/api/orders/{order['id']}/status", json={"status": "shipped"}, headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "shipped"
    msg = smtp.return_value.__enter__.return_value.send_message.call_args[0][0]
    assert msg["To"] == user.email
    assert msg["Subject"] == f"Order {order['orderNumber']} - Shipped"


def test_admin_status_update_rejects_unknown_status(client, make_user, auth_headers):
    admin = make_user(is_admin=True)

    resp = client.put("/api/orders/any/status", json={"status": "lost"}, headers=auth_headers(admin))

    assert resp.status_code == 400


def test_checkout_endpoint(client, user, qr_code, auth_headers):
    headers = auth_headers(user)
    client.post("/api/cart", json={"qrCodeId": qr_code.id, "productType": "sticker", "quantity": 2}, headers=headers)

    resp = client.post("/api/orders/checkout", json={"shippingAddress": "1 Main St"}, headers=headers)

    assert resp.status_code == 201
    assert len(resp.get_json()["data"]) == 1
    assert client.get("/api/cart/count", headers=headers).get_json()["data"]["count"] == 0
