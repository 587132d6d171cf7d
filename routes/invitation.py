"""Invitation blueprint: public waitlist applications."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func
from werkzeug.exceptions import BadRequest

from models import db
from models.invitation_request import InvitationRequest
from routes.auth import invitation_only_enabled
from utils.request_validation import (
    clean_str,
    is_valid_email,
    normalize_email,
    optional_str,
    parse_json_request,
)

DUPLICATE_MESSAGE = (
    "This email address is already on our waitlist. We'll be in touch soon!"
)

invitation_bp = Blueprint("invitation", __name__)


@invitation_bp.route("/waitlist", methods=["POST"])
def join_waitlist():
    """Record a waitlist application; new entries always start as pending."""

    payload = parse_json_request(
        request, required_keys=("firstName", "lastName", "email", "company")
    )
    email = normalize_email(payload.get("email"))
    if not is_valid_email(email):
        raise BadRequest("A valid email address is required.")

    existing = InvitationRequest.query.filter(
        func.lower(InvitationRequest.email) == email
    ).first()
    if existing is not None:
        raise BadRequest(DUPLICATE_MESSAGE)

    entry = InvitationRequest(
        first_name=clean_str(payload.get("firstName")),
        last_name=clean_str(payload.get("lastName")),
        email=email,
        phone=optional_str(payload.get("phone")),
        company=clean_str(payload.get("company")),
        message=optional_str(payload.get("message")),
        status="pending",
    )
    db.session.add(entry)
    db.session.commit()

    current_app.logger.info("Waitlist application %s received", entry.id)
    return jsonify(entry.to_dict()), HTTPStatus.CREATED


@invitation_bp.route("/status", methods=["GET"])
def invitation_status():
    """Expose whether client registration currently needs an invitation."""

    return jsonify({"invitationOnly": invitation_only_enabled()})
