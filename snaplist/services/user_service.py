import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..exceptions import AuthError, ValidationError
from ..extensions import db
from ..models.user import User
from ..repositories.user_repository import get_user_by_email
from .email_service import send_welcome_email
from .membership_service import create_default_membership

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def register_user(email: str, password: str, first_name: str | None = None,
                  last_name: str | None = None, company: str | None = None) -> User:
    """Create a user on the FREE tier and send the welcome email (best effort)."""
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required", field="email")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password")
    if get_user_by_email(email):
        raise ValidationError("User already exists", field="email")

    user = User(
        email=email,
        password=generate_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        company=company,
    )
    db.session.add(user)
    db.session.commit()

    create_default_membership(user.id)

    if not send_welcome_email(user.email, user.first_name):
        logger.warning(f"Welcome email to {user.email} was not delivered")

    return user


def authenticate(email: str, password: str) -> User:
    user = get_user_by_email((email or "").strip().lower())
    if not user or not password or not check_password_hash(user.password, password):
        raise AuthError("Invalid credentials")
    return user


def save_address(user: User, address: str) -> User:
    if not address:
        raise ValidationError("Address is required", field="address")
    user.saved_address = address
    db.session.commit()
    return user
