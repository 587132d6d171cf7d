"""Messages blueprint: staff-to-user messaging and read receipts."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy import and_, or_
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models import db
from models.message import MESSAGE_TYPES, PRIORITIES, Message
from models.user import User
from utils.access import require_capability
from utils.permissions import can_send_messages
from utils.request_validation import clean_str, parse_json_request

messages_bp = Blueprint("messages", __name__)


def _parse_recipient_id(value) -> int:
    if isinstance(value, bool):
        raise BadRequest("recipientId must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise BadRequest("recipientId must be an integer.") from exc


@messages_bp.route("", methods=["GET"])
@jwt_required()
def list_messages():
    """Return messages received by the current user, newest first."""

    query = Message.query.filter_by(recipient_id=current_user.id)
    message_type = (request.args.get("type") or "").strip()
    if message_type:
        if message_type not in MESSAGE_TYPES:
            raise BadRequest(
                "type must be one of: {}.".format(", ".join(MESSAGE_TYPES))
            )
        query = query.filter_by(message_type=message_type)

    messages = query.order_by(Message.created_at.desc(), Message.id.desc()).all()
    return jsonify([message.to_dict() for message in messages])


@messages_bp.route("/send", methods=["POST"])
@jwt_required()
def send_message():
    """Send a message to one user; staff only."""

    sender = require_capability(
        can_send_messages, "Only admins and managers can send messages."
    )
    payload = parse_json_request(
        request, required_keys=("recipientId", "subject", "content")
    )
    recipient_id = _parse_recipient_id(payload.get("recipientId"))
    message_type = clean_str(payload.get("messageType")) or "general"
    priority = clean_str(payload.get("priority")) or "normal"

    if message_type not in MESSAGE_TYPES:
        raise BadRequest(
            "messageType must be one of: {}.".format(", ".join(MESSAGE_TYPES))
        )
    if priority not in PRIORITIES:
        raise BadRequest("priority must be one of: {}.".format(", ".join(PRIORITIES)))

    recipient = db.session.get(User, recipient_id)
    if recipient is None:
        raise NotFound("Recipient not found.")

    message = Message(
        sender_id=sender.id,
        recipient_id=recipient.id,
        subject=clean_str(payload.get("subject")),
        content=clean_str(payload.get("content")),
        message_type=message_type,
        priority=priority,
    )
    db.session.add(message)
    db.session.commit()

    current_app.logger.info(
        "Message %s sent from %s to %s", message.id, sender.id, recipient.id
    )
    return jsonify(message.to_dict()), 201


@messages_bp.route("/<int:message_id>/read", methods=["POST"])
@jwt_required()
def mark_read(message_id: int):
    """Mark a message read; only its recipient may do so."""

    message = db.session.get(Message, message_id)
    if message is None:
        raise NotFound("Message not found.")
    if message.recipient_id != current_user.id:
        raise Forbidden("Only the recipient can mark a message as read.")

    message.mark_read()
    db.session.commit()
    return jsonify({"message": "Message marked as read", "id": message.id})


@messages_bp.route("/conversation/<int:user_id>", methods=["GET"])
@jwt_required()
def conversation(user_id: int):
    """Return the exchange between the current staff user and another user."""

    staff = require_capability(can_send_messages)
    messages = (
        Message.query.filter(
            or_(
                and_(Message.sender_id == staff.id, Message.recipient_id == user_id),
                and_(Message.sender_id == user_id, Message.recipient_id == staff.id),
            )
        )
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
    return jsonify([message.to_dict() for message in messages])
