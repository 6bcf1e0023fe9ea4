import base64
import datetime

from snaplist.models import QRCode, QRCodeScan


def test_create_qr_code(client, user, tiers, auth_headers):
    resp = client.post(
        "/api/qr-codes",
        json={"name": "Open house", "destinationUrl": "example.com/house"},
        headers=auth_headers(user),
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["destinationUrl"] == "https://example.com/house"
    assert len(data["shortCode"]) == 8
    assert data["scanCount"] == 0


def test_create_rejects_javascript_url(client, user, tiers, auth_headers):
    resp = client.post(
        "/api/qr-codes",
        json={"name": "Bad", "destinationUrl": "javascript:alert(1)"},
        headers=auth_headers(user),
    )

    assert resp.status_code == 400


def test_free_tier_quota(client, user, tiers, make_qr_code, auth_headers):
    for i in range(5):
        make_qr_code(user, name=f"QR {i}")

    resp = client.post(
        "/api/qr-codes",
        json={"name": "Sixth", "destinationUrl": "https://example.com"},
        headers=auth_headers(user),
    )

    assert resp.status_code == 403
    assert "limit (5)" in resp.get_json()["message"]


def test_pro_tier_is_unlimited(client, make_user, tiers, make_qr_code, auth_headers):
    user = make_user(tier_name="PRO")
    for i in range(6):
        make_qr_code(user, name=f"QR {i}")

    resp = client.post(
        "/api/qr-codes",
        json={"name": "Seventh", "destinationUrl": "https://example.com"},
        headers=auth_headers(user),
    )

    assert resp.status_code == 201


def test_other_users_qr_code_is_forbidden(client, make_user, make_qr_code, auth_headers):
    owner, intruder = make_user(), make_user()
    qr_code = make_qr_code(owner)

    assert client.get(f"/api/qr-codes/{qr_code.id}", headers=auth_headers(intruder)).status_code == 403
    assert client.get("/api/qr-codes/missing", headers=auth_headers(intruder)).status_code == 404


def test_update_destination_records_history(client, user, qr_code, auth_headers):
    headers = auth_headers(user)

    resp = client.put(
        f"/api/qr-codes/{qr_code.id}",
        json={"destinationUrl": "https://example.com/new"},
        headers=headers,
    )
    assert resp.get_json()["data"]["destinationUrl"] == "https://example.com/new"

    history = client.get(f"/api/qr-codes/{qr_code.id}/url-history", headers=headers).get_json()["data"]
    assert [h["destinationUrl"] for h in history] == ["https://example.com/listing"]


def test_delete_qr_code(client, user, qr_code, auth_headers):
    qr_id = qr_code.id

    resp = client.delete(f"/api/qr-codes/{qr_id}", headers=auth_headers(user))

    assert resp.status_code == 200
    assert QRCode.query.filter_by(id=qr_id).first() is None


def test_analytics_requires_tier_feature(client, user, tiers, qr_code, auth_headers):
    resp = client.get(f"/api/qr-codes/{qr_code.id}/analytics", headers=auth_headers(user))

    assert resp.status_code == 403


def test_analytics_breakdown(client, db, make_user, tiers, make_qr_code, auth_headers):
    user = make_user(tier_name="STANDARD")
    qr_code = make_qr_code(user)
    db.session.add_all([
        QRCodeScan(qr_code_id=qr_code.id, ip_address="1.1.1.1", device_type="mobile", browser="Safari", country="Canada"),
        QRCodeScan(qr_code_id=qr_code.id, ip_address="1.1.1.1", device_type="mobile", browser="Safari", country="Canada"),
        QRCodeScan(qr_code_id=qr_code.id, ip_address="2.2.2.2", device_type="desktop", browser="Chrome"),
    ])
    db.session.commit()

    data = client.get(f"/api/qr-codes/{qr_code.id}/analytics", headers=auth_headers(user)).get_json()["data"]

    assert data["totalScans"] == 3
    assert data["uniqueVisitors"] == 2
    assert data["deviceBreakdown"] == {"mobile": 2, "desktop": 1}
    assert data["locationBreakdown"] == {"Canada": 2, "Unknown": 1}


def test_download_returns_png_data_url(client, user, qr_code, auth_headers):
    data = client.get(f"/api/qr-codes/{qr_code.id}/download", headers=auth_headers(user)).get_json()["data"]

    prefix = "data:image/png;base64,"
    assert data["dataUrl"].startswith(prefix)
    assert base64.b64decode(data["dataUrl"][len(prefix):]).startswith(b"\x89PNG")


def test_delete_qr_code_with_orders_is_rejected(client, user, qr_code, auth_headers):
    from snaplist.services.order_service import create_order

    create_order(user.id, qr_code.id, "yard_sign", 1, "12.99", "1 Main St")

    resp = client.delete(f"/api/qr-codes/{qr_code.id}", headers=auth_headers(user))

    assert resp.status_code == 400
    assert QRCode.query.filter_by(id=qr_code.id).first() is not None


def test_user_analytics_requires_tier_feature(client, user, tiers, auth_headers):
    assert client.get("/api/analytics", headers=auth_headers(user)).status_code == 403


def test_user_analytics_across_qr_codes(client, db, make_user, tiers, make_qr_code, auth_headers):
    user, other = make_user(tier_name="STANDARD"), make_user()
    front, back = make_qr_code(user, name="Front"), make_qr_code(user, name="Back", is_active=False)
    now = datetime.datetime.utcnow()
    db.session.add_all([
        QRCodeScan(qr_code_id=front.id, ip_address="1.1.1.1", device_type="mobile", scanned_at=now),
        QRCodeScan(qr_code_id=front.id, ip_address="2.2.2.2", device_type="mobile", scanned_at=now),
        QRCodeScan(qr_code_id=back.id, ip_address="1.1.1.1", device_type="desktop", scanned_at=now),
        QRCodeScan(qr_code_id=front.id, ip_address="3.3.3.3", scanned_at=now - datetime.timedelta(days=40)),
        QRCodeScan(qr_code_id=make_qr_code(other).id, ip_address="9.9.9.9", scanned_at=now),
    ])
    db.session.commit()
    headers = auth_headers(user)

    data = client.get("/api/analytics?timeRange=30days", headers=headers).get_json()["data"]

    assert data["totalScans"] == 3
    assert data["uniqueVisitors"] == 2
    assert data["totalQrCodes"] == 2
    assert data["activeQrCodes"] == 1
    assert data["deviceBreakdown"] == {"mobile": 2, "desktop": 1}
    assert data["scansByDay"] == {now.date().isoformat(): 3}
    assert [(q["name"], q["scans"]) for q in data["topQrCodes"]] == [("Front", 2), ("Back", 1)]

    all_time = client.get("/api/analytics?timeRange=all", headers=headers).get_json()["data"]
    assert all_time["totalScans"] == 4


def test_user_analytics_rejects_unknown_range(client, make_user, tiers, auth_headers):
    user = make_user(tier_name="PRO")

    assert client.get("/api/analytics?timeRange=forever", headers=auth_headers(user)).status_code == 400
