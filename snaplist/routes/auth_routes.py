from functools import wraps

import jwt
from flask import Blueprint, current_app, request

from ..repositories.user_repository import get_user_by_id
from ..schemas.user_schema import serialize_user
from ..services import user_service
from ..services.membership_service import get_user_membership
from ..utils.jwt_helper import encode_token, decode_token
from ..utils.response import api_response

auth_bp = Blueprint("auth", __name__)

AUTH_COOKIE = "auth-token"


def _set_auth_cookie(response, token):
    response.set_cookie(
        AUTH_COOKIE,
        token,
        httponly=True,
        secure=not current_app.config.get("TESTING", False),
        samesite="Lax",
        max_age=int(current_app.config.get("JWT_EXPIRES_HOURS", 24)) * 3600,
    )
    return response


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None
        auth_header = request.headers.get("Authorization", "")
        if auth_header:
            token = auth_header.split(" ")[1] if " " in auth_header else auth_header
        if not token:
            token = request.cookies.get(AUTH_COOKIE)

        if not token:
            return api_response(False, "Token is missing!", None, 401)

        try:
            payload = decode_token(token)
        except jwt.InvalidTokenError:
            return api_response(False, "Invalid or expired token!", None, 401)

        current_user = get_user_by_id(payload.get("user_id"))
        if not current_user:
            return api_response(False, "User not found!", None, 401)

        return f(current_user, *args, **kwargs)

    return decorated


def admin_required(f):
    @wraps(f)
    def decorated(current_user, *args, **kwargs):
        if not current_user.is_admin:
            return api_response(False, "Admin access required", None, 403)
        return f(current_user, *args, **kwargs)

    return decorated


@auth_bp.route("/api/auth/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}

    user = user_service.register_user(
        email=data.get("email"),
        password=data.get("password"),
        first_name=data.get("firstName"),
        last_name=data.get("lastName"),
        company=data.get("company"),
    )
    token = encode_token(user.id, user.email)

    response, status = api_response(True, "Signup successful", {
        "token": token,
        "user": serialize_user(user, get_user_membership(user.id)),
    }, 201)
    return _set_auth_cookie(response, token), status


@auth_bp.route("/api/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}

    user = user_service.authenticate(data.get("email"), data.get("password"))
    token = encode_token(user.id, user.email)

    response, status = api_response(True, "Login successful", {
        "token": token,
        "user": serialize_user(user, get_user_membership(user.id)),
    })
    return _set_auth_cookie(response, token), status


@auth_bp.route("/api/auth/logout", methods=["POST"])
def logout():
    response, status = api_response(True, "Logged out successfully", None)
    response.delete_cookie(AUTH_COOKIE)
    return response, status


@auth_bp.route("/api/auth/me")
@token_required
def me(current_user):
    return api_response(True, "User fetched", serialize_user(current_user, get_user_membership(current_user.id)))


@auth_bp.route("/api/users/save-address", methods=["POST"])
@token_required
def save_address(current_user):
    data = request.get_json(silent=True) or {}
    user_service.save_address(current_user, data.get("address"))
    return api_response(True, "Address saved", None)
