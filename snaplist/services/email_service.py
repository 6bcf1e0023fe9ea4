import logging
import smtplib
from email.message import EmailMessage

from flask import current_app
from markupsafe import escape

from ..models.order import OrderStatus

logger = logging.getLogger(__name__)


def _smtp_host() -> str:
    host = current_app.config.get("EMAIL_SMTP_HOST")
    if host:
        return host
    region = current_app.config.get("AWS_REGION", "ca-central-1")
    return f"email-smtp.{region}.amazonaws.com"


def build_message(to: str, subject: str, html: str, text: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = current_app.config.get("EMAIL_FROM", "noreply@snaplist.com")
    msg["To"] = to
    msg["Reply-To"] = current_app.config.get("EMAIL_REPLY_TO", "support@snaplist.com")
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")
    return msg


def send_email(to: str, subject: str, html: str, text: str) -> bool:
    """
    Send a transactional email through the SES SMTP endpoint.

    Returns True on success. Every failure is logged and reported as False;
    nothing is retried.
    """
    username = current_app.config.get("AWS_SES_SMTP_USERNAME")
    password = current_app.config.get("AWS_SES_SMTP_PASSWORD")
    if not username or not password:
        logger.warning(f"Email credentials not configured, not sending '{subject}' to {to}")
        return False

    try:
        msg = build_message(to, subject, html, text)
        port = int(current_app.config.get("EMAIL_SMTP_PORT", 587))
        timeout = current_app.config.get("EMAIL_TIMEOUT", 10)
        with smtplib.SMTP(_smtp_host(), port, timeout=timeout) as server:
            server.starttls()
            server.login(username, password)
            server.send_message(msg)
        logger.info(f"Email sent successfully to {to}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to}: {e}")
        return False


def format_order_status_email(order_number: str, status, customer_name: str | None = None) -> tuple[str, str, str]:
    """Return (subject, html, text) for an order status change.

    ``status`` may be an OrderStatus or its string value; unknown values raise ValueError.
    """
    status = OrderStatus(status)

    subject = f"Order {order_number} - {status.label}"

    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #333;">Order Update</h2>
      <p>Hi {escape(customer_name or 'there')},</p>
      <p>Your order <strong>{order_number}</strong> status has been updated:</p>
      <div style="background: {status.color}; color: white; padding: 10px 20px; border-radius: 5px; display: inline-block;">
        {status.value.upper()}
      </div>
      <p>{status.message}</p>
      <p>Thank you for shopping with SnapList!</p>
    </div>
    """

    text = f"Order {order_number} is now {status.value}. {status.message}"
    return subject, html, text


def send_order_status_email(email: str, order_number: str, status, customer_name: str | None = None) -> bool:
    try:
        subject, html, text = format_order_status_email(order_number, status, customer_name)
    except ValueError:
        logger.error(f"No email template for order status {status!r}, order {order_number} not notified")
        return False
    return send_email(email, subject, html, text)


def send_welcome_email(email: str, name: str | None = None) -> bool:
    app_url = current_app.config.get("APP_URL", "https://snaplist.com")
    subject = "Welcome to SnapList!"

    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h1 style="color: #4F46E5;">Welcome to SnapList!</h1>
      <p>Hi {escape(name or 'there')},</p>
      <p>Thank you for joining SnapList. We're excited to have you on board!</p>
      <p>Start exploring our products and enjoy exclusive member benefits.</p>
      <a href="{app_url}" style="background: #4F46E5; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; display: inline-block;">
        Start Shopping
      </a>
    </div>
    """

    text = f"Welcome to SnapList! Thank you for joining us. Visit {app_url} to start shopping."
    return send_email(email, subject, html, text)


def send_newsletter_confirmation(email: str) -> bool:
    subject = "Newsletter Subscription Confirmed"

    html = """
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #4F46E5;">You're Subscribed!</h2>
      <p>Thank you for subscribing to the SnapList newsletter.</p>
      <p>You'll receive updates about new products, exclusive offers, and more.</p>
    </div>
    """

    text = "Thank you for subscribing to the SnapList newsletter!"
    return send_email(email, subject, html, text)
