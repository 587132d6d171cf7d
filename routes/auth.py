"""Authentication blueprint: sign-up, sign-in, session lookup and password reset."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, current_user, jwt_required
from sqlalchemy import func
from werkzeug.exceptions import BadRequest, Conflict, Forbidden, Unauthorized

from models import db
from models.password_reset_token import PasswordResetToken
from models.system_setting import SystemSetting
from models.user import User
from utils.errors import with_payload
from utils.permissions import SELF_SERVICE_ROLES
from utils.request_validation import (
    clean_str,
    is_valid_email,
    normalize_email,
    optional_str,
    parse_json_request,
)

MIN_PASSWORD_LENGTH = 8
FORGOT_PASSWORD_MESSAGE = (
    "If an account with this email exists, a password reset link has been sent."
)
INVITATION_ONLY_SETTING = "invitation_only_mode"

auth_bp = Blueprint("auth", __name__)


def invitation_only_enabled() -> bool:
    """Return the stored invitation-only switch, falling back to config."""
    stored = SystemSetting.get_value(INVITATION_ONLY_SETTING)
    if stored is None:
        return bool(current_app.config.get("INVITATION_ONLY_MODE", False))
    return stored.strip().lower() == "true"


def _find_user_by_email(email: str) -> User | None:
    return User.query.filter(func.lower(User.email) == email).first()


def _session_payload(user: User, message: str) -> dict:
    return {
        "message": message,
        "user": user.to_dict(),
        "token": create_access_token(identity=str(user.id)),
    }


def _find_reset_token(token: str) -> PasswordResetToken | None:
    if not token:
        return None
    reset_token = PasswordResetToken.query.filter_by(token=token).first()
    if reset_token is None or not reset_token.is_valid():
        return None
    return reset_token


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple:
    """Create an account and start a session for it."""
    payload = parse_json_request(
        request, required_keys=("email", "password", "firstName", "lastName")
    )
    email = normalize_email(payload.get("email"))
    password = clean_str(payload.get("password"))
    confirm_password = clean_str(payload.get("confirmPassword"))
    role = clean_str(payload.get("role")).lower() or "client"

    if not is_valid_email(email):
        raise BadRequest("A valid email address is required.")
    if password != confirm_password:
        raise BadRequest("Passwords don't match.")
    if role not in SELF_SERVICE_ROLES:
        raise BadRequest("Role must be one of: client, participant.")

    if _find_user_by_email(email) is not None:
        raise Conflict("User already exists.")

    if role == "client" and invitation_only_enabled():
        current_app.logger.info("Blocked client signup for %s: invitation only", email)
        raise with_payload(
            Forbidden("Client registration is currently by invitation only."),
            invitationOnly=True,
        )

    user = User(
        email=email,
        first_name=clean_str(payload.get("firstName")),
        last_name=clean_str(payload.get("lastName")),
        role=role,
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    current_app.logger.info("Created %s account %s", user.role, user.id)
    return jsonify(_session_payload(user, "User created successfully")), HTTPStatus.CREATED


@auth_bp.route("/signin", methods=["POST"])
def signin() -> tuple:
    """Authenticate a user and return a bearer token."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    email = normalize_email(payload.get("email"))
    password = clean_str(payload.get("password"))

    user = _find_user_by_email(email)
    if user is None or not user.check_password(password):
        raise Unauthorized("Invalid credentials")
    if not user.is_active:
        raise Unauthorized("Account is deactivated")
    if user.is_banned:
        raise Unauthorized("Account is suspended")

    return jsonify(_session_payload(user, "Sign in successful")), HTTPStatus.OK


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    """Return the user the bearer token belongs to."""
    return jsonify(current_user.to_dict())


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    """Email a reset link; the response never reveals whether the account exists."""
    payload = parse_json_request(request, required_keys=("email",))
    email = normalize_email(payload.get("email"))
    if not is_valid_email(email):
        raise BadRequest("Invalid email format")

    user = _find_user_by_email(email)
    if user is not None:
        ttl = int(current_app.config.get("PASSWORD_RESET_TTL_MINUTES", 60))
        reset_token = PasswordResetToken(
            user_id=user.id,
            token=secrets.token_hex(32),
            expires_at=datetime.utcnow() + timedelta(minutes=ttl),
        )
        db.session.add(reset_token)
        db.session.commit()

        link = "{}/auth/reset-password/{}".format(
            current_app.config.get("FRONTEND_URL", "").rstrip("/"), reset_token.token
        )
        current_app.extensions["mailer"].send(
            user.email,
            "Reset your FokusHub360 password",
            f"Hello {user.first_name or 'User'},\n\n"
            f"Use the link below within {ttl} minutes to choose a new password:\n"
            f"{link}\n",
        )

    return jsonify({"message": FORGOT_PASSWORD_MESSAGE})


@auth_bp.route("/verify-reset-token/<string:token>", methods=["GET"])
def verify_reset_token(token: str):
    """Tell the reset page whether a token can still be used."""
    if _find_reset_token(token) is None:
        raise with_payload(BadRequest("Invalid or expired reset token"), valid=False)
    return jsonify({"valid": True, "message": "Token is valid"})


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    """Consume a reset token and set a new password."""
    payload = parse_json_request(request, required_keys=("token", "newPassword"))
    new_password = clean_str(payload.get("newPassword"))
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )

    reset_token = _find_reset_token(optional_str(payload.get("token")) or "")
    if reset_token is None:
        raise BadRequest("Invalid or expired reset token")

    user = reset_token.user
    user.set_password(new_password)
    reset_token.is_used = True
    db.session.commit()

    current_app.extensions["mailer"].send(
        user.email,
        "Your FokusHub360 password was changed",
        f"Hello {user.first_name or 'User'},\n\nYour password has been reset.\n",
    )
    current_app.logger.info("Password reset for user %s", user.id)
    return jsonify({"message": "Password reset successful"})
