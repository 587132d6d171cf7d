"""Contact blueprint for the public contact form."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from models import db
from models.contact_request import ContactRequest
from utils.request_validation import (
    clean_str,
    is_valid_email,
    normalize_email,
    optional_str,
    parse_json_request,
)

CONTACT_CATEGORIES = ("general", "support", "billing", "partnership", "privacy")

contact_bp = Blueprint("contact", __name__)


@contact_bp.route("", methods=["POST"])
def submit_contact_request():
    """Store a contact form submission."""

    payload = parse_json_request(
        request, required_keys=("name", "email", "subject", "message")
    )
    email = normalize_email(payload.get("email"))
    if not is_valid_email(email):
        raise BadRequest("A valid email address is required.")

    category = optional_str(payload.get("category"))
    if category is not None and category not in CONTACT_CATEGORIES:
        raise BadRequest(
            "Category must be one of: {}.".format(", ".join(CONTACT_CATEGORIES))
        )

    entry = ContactRequest(
        name=clean_str(payload.get("name")),
        email=email,
        subject=clean_str(payload.get("subject")),
        category=category,
        message=clean_str(payload.get("message")),
    )
    db.session.add(entry)
    db.session.commit()

    current_app.logger.info("Contact request %s received", entry.id)
    return jsonify(entry.to_dict()), HTTPStatus.CREATED
