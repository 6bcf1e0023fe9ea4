"""Shared fixtures: a fresh app on in-memory SQLite per test, users, QR codes and auth headers."""

from unittest.mock import MagicMock

import pytest

from snaplist import create_app
from snaplist.config import TestingConfig
from snaplist.extensions import db as _db
from snaplist.models import QRCode, User, UserMembership
from snaplist.services.seed_service import seed_membership_tiers
from snaplist.utils.jwt_helper import encode_token
from werkzeug.security import generate_password_hash


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture(autouse=True)
def smtp(monkeypatch):
    """No test talks to a real SMTP server."""
    smtp_cls = MagicMock(name="SMTP")
    monkeypatch.setattr("snaplist.services.email_service.smtplib.SMTP", smtp_cls)
    return smtp_cls


@pytest.fixture
def tiers(app):
    return seed_membership_tiers()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(email=None, tier_name="FREE", is_admin=False, first_name="Test"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password=generate_password_hash("secret123"),
            first_name=first_name,
            last_name="User",
            is_admin=is_admin,
        )
        db.session.add(user)
        db.session.commit()
        db.session.add(UserMembership(user_id=user.id, tier_name=tier_name, is_active=True))
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def make_qr_code(db):
    counter = {"n": 0}

    def _make_qr_code(user, name="Front door", destination_url="https://example.com/listing", **fields):
        counter["n"] += 1
        qr_code = QRCode(
            user_id=user.id,
            name=name,
            destination_url=destination_url,
            short_code=fields.pop("short_code", f"code{counter['n']:04d}"),
            **fields,
        )
        db.session.add(qr_code)
        db.session.commit()
        return qr_code

    return _make_qr_code


@pytest.fixture
def qr_code(user, make_qr_code):
    return make_qr_code(user)


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {encode_token(user.id, user.email)}"}

    return _auth_headers
