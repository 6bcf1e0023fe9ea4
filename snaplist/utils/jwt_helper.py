import datetime
import jwt
from flask import current_app


def encode_token(user_id: str, email: str | None = None) -> str:
    hours = int(current_app.config.get("JWT_EXPIRES_HOURS", 24))
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=hours),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token: str) -> dict:
    return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
