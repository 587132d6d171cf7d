"""Verification blueprints for identity document uploads and staff review."""

from __future__ import annotations

import os
import uuid
from datetime import datetime
from http import HTTPStatus
from pathlib import Path
from typing import Iterable

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, NotFound

from models import db
from models.user import User
from models.verification_document import DOCUMENT_TYPES, VerificationDocument
from storage.local_storage import LocalStorage
from utils.access import require_capability
from utils.permissions import can_review_verification
from utils.request_validation import optional_str

verification_bp = Blueprint("verification", __name__)
verification_admin_bp = Blueprint("verification_admin", __name__)

MAX_UPLOAD_SIZE_DEFAULT = 10 * 1024 * 1024  # 10 MiB
ALLOWED_TYPES_DEFAULT = {"image/jpeg", "image/png", "image/jpg", "application/pdf"}
REMINDER_INTERVAL_DAYS = 7


def _allowed_types() -> set[str]:
    configured = current_app.config.get("ALLOWED_UPLOAD_TYPES")
    if not configured:
        return set(ALLOWED_TYPES_DEFAULT)
    if isinstance(configured, str):
        values: Iterable[str] = configured.split(",")
    else:
        values = configured

    normalized = {
        raw.strip().lower() for raw in values if isinstance(raw, str) and raw.strip()
    }
    return normalized or set(ALLOWED_TYPES_DEFAULT)


def _stream_size(file: FileStorage) -> int:
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    return size


def _validate_document(file: FileStorage) -> int:
    """Check name, MIME type and size; return the size in bytes."""

    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("No file uploaded")

    mimetype = (file.mimetype or "").lower()
    if mimetype not in _allowed_types():
        raise BadRequest("Invalid file type. Only JPEG, PNG, and PDF files are allowed.")

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", MAX_UPLOAD_SIZE_DEFAULT))
    size = _stream_size(file)
    if size > max_size:
        raise BadRequest("File exceeds the maximum upload size of 10MB.")
    return size


def _build_storage_name(user_id: int, doc_type: str, original: str) -> str:
    suffix = Path(original).suffix.lower()
    return f"{user_id}_{doc_type}_{uuid.uuid4().hex}{suffix}"


def _get_document_or_404(document_id: int) -> VerificationDocument:
    document = db.session.get(VerificationDocument, document_id)
    if document is None:
        raise NotFound("Document not found.")
    return document


def _require_reviewer() -> User:
    return require_capability(
        can_review_verification, "Admin or manager privileges required."
    )


@verification_bp.route("/upload", methods=["POST"])
@jwt_required()
def upload_document():
    """Upload a document for verification and create a pending record."""

    user = current_user

    file = request.files.get("document")
    if not isinstance(file, FileStorage):
        raise BadRequest("No file uploaded")

    doc_type = (request.form.get("type") or "").strip().lower()
    if doc_type not in DOCUMENT_TYPES:
        raise BadRequest("Invalid document type")

    size = _validate_document(file)

    storage = LocalStorage(current_app.config.get("UPLOAD_DIR"))
    original_name = file.filename or "document"
    stored_key = storage.save(
        file,
        _build_storage_name(user.id, doc_type, original_name),
        folder="verification",
    )

    document = VerificationDocument(
        user_id=user.id,
        doc_type=doc_type,
        file_name=stored_key,
        original_name=original_name,
        file_size=size,
        mime_type=(file.mimetype or "application/octet-stream").lower(),
        status="pending",
    )
    db.session.add(document)
    user.set_verification_status("pending")
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        storage.delete(stored_key)
        raise

    current_app.logger.info(
        "User %s uploaded %s document %s", user.id, doc_type, document.id
    )
    body = document.to_dict()
    body["message"] = "Document uploaded successfully"
    return jsonify(body), HTTPStatus.CREATED


@verification_bp.route("/status", methods=["GET"])
@jwt_required()
def verification_status():
    """Return the verification status and the user's documents."""

    user = current_user
    documents = (
        VerificationDocument.query.filter_by(user_id=user.id)
        .order_by(VerificationDocument.uploaded_at.desc(), VerificationDocument.id.desc())
        .all()
    )

    joined = user.created_at or datetime.utcnow()
    days_since_joined = max((datetime.utcnow() - joined).days, 0)
    reminder_count = (
        days_since_joined // REMINDER_INTERVAL_DAYS
        if days_since_joined > REMINDER_INTERVAL_DAYS
        else 0
    )

    return jsonify(
        {
            "verificationStatus": user.verification_status,
            "documents": [document.to_dict() for document in documents],
            "daysSinceJoined": days_since_joined,
            "reminderCount": reminder_count,
            "canResubmit": user.verification_status != "pending"
            or can_review_verification(user.role),
        }
    )


@verification_admin_bp.route("/documents/<int:user_id>", methods=["GET"])
@jwt_required()
def list_user_documents(user_id: int):
    """List a user's documents for staff review."""

    _require_reviewer()
    if db.session.get(User, user_id) is None:
        raise NotFound("User not found.")

    documents = (
        VerificationDocument.query.filter_by(user_id=user_id)
        .order_by(VerificationDocument.uploaded_at.asc(), VerificationDocument.id.asc())
        .all()
    )
    return jsonify([document.to_dict() for document in documents])


def _review(document_id: int, status: str, reason: str | None):
    reviewer = _require_reviewer()
    document = _get_document_or_404(document_id)

    document.status = status
    document.rejection_reason = reason
    document.reviewed_by = reviewer.id
    document.reviewed_at = datetime.utcnow()
    document.user.set_verification_status(status)
    db.session.commit()

    current_app.logger.info(
        "Document %s marked %s by reviewer %s", document.id, status, reviewer.id
    )
    body = document.to_dict()
    body["verificationStatus"] = document.user.verification_status
    return jsonify(body)


@verification_admin_bp.route("/documents/<int:document_id>/approve", methods=["POST"])
@jwt_required()
def approve_document(document_id: int):
    """Approve a document and mark its owner as verified."""

    return _review(document_id, "verified", None)


@verification_admin_bp.route("/documents/<int:document_id>/reject", methods=["POST"])
@jwt_required()
def reject_document(document_id: int):
    """Reject a document, capturing an optional reason."""

    reason = None
    if request.content_length and request.content_length > 0:
        if not request.is_json:
            raise BadRequest("Rejection reasons must be submitted as JSON.")
        payload = request.get_json(silent=True) or {}
        reason = optional_str(payload.get("reason"))
    return _review(document_id, "rejected", reason)
