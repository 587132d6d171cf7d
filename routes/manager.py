"""Manager blueprint: participant oversight."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import NotFound

from models import db
from models.user import User
from utils.access import require_capability
from utils.permissions import can_manage_participants
from utils.request_validation import optional_str

manager_bp = Blueprint("manager", __name__)


def _require_manager() -> User:
    return require_capability(
        can_manage_participants, "Manager or admin privileges required."
    )


def _get_participant_or_404(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None or user.role != "participant":
        raise NotFound("Participant not found.")
    return user


@manager_bp.route("/participants", methods=["GET"])
@jwt_required()
def list_participants():
    """List participants with their verification and questionnaire state."""

    _require_manager()
    participants = (
        User.query.filter_by(role="participant")
        .order_by(User.last_name.asc(), User.first_name.asc(), User.id.asc())
        .all()
    )
    return jsonify([participant.to_dict() for participant in participants])


@manager_bp.route("/participants/<int:user_id>/ban", methods=["POST"])
@jwt_required()
def ban_participant(user_id: int):
    """Ban a participant; their existing tokens stop working."""

    manager = _require_manager()
    participant = _get_participant_or_404(user_id)

    reason = None
    if request.is_json:
        reason = optional_str((request.get_json(silent=True) or {}).get("reason"))

    participant.is_banned = True
    participant.ban_reason = reason
    db.session.commit()

    current_app.logger.info("Participant %s banned by %s", participant.id, manager.id)
    return jsonify(participant.to_dict())


@manager_bp.route("/participants/<int:user_id>/unban", methods=["POST"])
@jwt_required()
def unban_participant(user_id: int):
    manager = _require_manager()
    participant = _get_participant_or_404(user_id)

    participant.is_banned = False
    participant.ban_reason = None
    db.session.commit()

    current_app.logger.info("Participant %s unbanned by %s", participant.id, manager.id)
    return jsonify(participant.to_dict())
