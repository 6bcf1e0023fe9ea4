import smtplib

import pytest

from snaplist.models import OrderStatus
from snaplist.services import email_service


def test_order_status_email_for_shipped(app):
    subject, html, text = email_service.format_order_status_email("42", "shipped", "Ada")

    assert subject == "Order 42 - Shipped"
    assert "shipped and is on its way" in text
    assert text.startswith("Order 42 is now shipped.")
    assert "Hi Ada," in html
    assert OrderStatus.SHIPPED.color in html
    assert "SHIPPED" in html


def test_order_status_email_without_name(app):
    _, html, _ = email_service.format_order_status_email("7", OrderStatus.DELIVERED)
    assert "Hi there," in html


@pytest.mark.parametrize("status", list(OrderStatus))
def test_every_status_has_a_template(app, status):
    subject, html, text = email_service.format_order_status_email("1", status)
    assert subject == f"Order 1 - {status.value.capitalize()}"
    assert status.message in text
    assert status.color in html


def test_unknown_status_is_rejected(app):
    with pytest.raises(ValueError):
        email_service.format_order_status_email("1", "lost-in-space")


def test_send_email_uses_ses_smtp(app, smtp):
    assert email_service.send_email("buyer@example.com", "Hello", "<p>Hi</p>", "Hi") is True

    smtp.assert_called_once_with("email-smtp.ca-central-1.amazonaws.com", 587, timeout=10)
    server = smtp.return_value.__enter__.return_value
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("smtp-user", "smtp-pass")

    msg = server.send_message.call_args[0][0]
    assert msg["To"] == "buyer@example.com"
    assert msg["From"] == "noreply@snaplist.com"
    assert msg["Reply-To"] == "support@snaplist.com"
    assert msg["Subject"] == "Hello"


def test_send_email_failure_returns_false(app, smtp):
    smtp.side_effect = smtplib.SMTPException("connection refused")

    assert email_service.send_email("buyer@example.com", "Hello", "<p>Hi</p>", "Hi") is False


def test_send_email_without_credentials_returns_false(app, smtp):
    app.config["AWS_SES_SMTP_USERNAME"] = None

    assert email_service.send_email("buyer@example.com", "Hello", "<p>Hi</p>", "Hi") is False
    smtp.assert_not_called()


def test_send_order_status_email_sends_formatted_message(app, smtp):
    assert email_service.send_order_status_email("buyer@example.com", "42", "shipped") is True

    msg = smtp.return_value.__enter__.return_value.send_message.call_args[0][0]
    assert msg["Subject"] == "Order 42 - Shipped"


def test_welcome_and_newsletter_subjects(app, smtp):
    email_service.send_welcome_email("new@example.com", "Ada")
    email_service.send_newsletter_confirmation("new@example.com")

    server = smtp.return_value.__enter__.return_value
    subjects = [c[0][0]["Subject"] for c in server.send_message.call_args_list]
    assert subjects == ["Welcome to SnapList!", "Newsletter Subscription Confirmed"]


def test_send_order_status_email_unknown_status_returns_false(app, smtp):
    assert email_service.send_order_status_email("buyer@example.com", "42", "refunded") is False
    smtp.assert_not_called()


def test_customer_name_is_escaped_in_html(app, smtp):
    _, html, _ = email_service.format_order_status_email("42", "shipped", "<script>alert(1)</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html

    email_service.send_welcome_email("new@example.com", "<b>Ada</b>")
    msg = smtp.return_value.__enter__.return_value.send_message.call_args[0][0]
    html_part = msg.get_body(preferencelist=("html",)).get_content()
    assert "&lt;b&gt;Ada&lt;/b&gt;" in html_part
