import datetime
import uuid
from ..extensions import db


class QRCode(db.Model):
    __tablename__ = "qr_codes"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    short_code = db.Column(db.String(32), nullable=False, unique=True, index=True)
    destination_url = db.Column(db.Text, nullable=False)
    is_active = db.Column(db.Boolean, default=True)

    custom_color = db.Column(db.String(20), default="#000000")
    custom_bg_color = db.Column(db.String(20), default="#FFFFFF")
    logo_url = db.Column(db.Text)

    scan_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)

    scans = db.relationship("QRCodeScan", backref="qr_code", lazy=True, cascade="all, delete-orphan")
    url_history = db.relationship("QRCodeUrlHistory", backref="qr_code", lazy=True, cascade="all, delete-orphan")
    cart_items = db.relationship("CartItem", backref="qr_code", lazy=True, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<QRCode {self.short_code}>"


class QRCodeScan(db.Model):
    __tablename__ = "qr_code_scans"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    qr_code_id = db.Column(db.String(36), db.ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False, index=True)
    ip_address = db.Column(db.String(50))
    user_agent = db.Column(db.String(300))
    country = db.Column(db.String(100))
    city = db.Column(db.String(100))
    device_type = db.Column(db.String(50))
    browser = db.Column(db.String(100))
    operating_system = db.Column(db.String(100))
    scanned_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)


class QRCodeUrlHistory(db.Model):
    __tablename__ = "qr_code_url_history"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    qr_code_id = db.Column(db.String(36), db.ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False, index=True)
    destination_url = db.Column(db.Text, nullable=False)
    changed_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
