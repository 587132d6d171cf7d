"""Admin blueprint: landing-page menu control and waitlist management."""

from __future__ import annotations

import json

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest

from models import db
from models.invitation_request import InvitationRequest
from models.system_setting import SystemSetting
from routes.auth import INVITATION_ONLY_SETTING, invitation_only_enabled
from utils.access import require_capability
from utils.menu import MENU_SECTIONS, default_menu, validate_menu
from utils.permissions import can_manage_settings
from utils.request_validation import parse_json_request

MENU_PREFIX = "menu_"

admin_bp = Blueprint("admin", __name__)


def _require_admin():
    return require_capability(can_manage_settings, "Admin privileges required.")


def load_menu_settings() -> dict[str, dict]:
    """Overlay stored menu rows on the defaults."""

    menu = default_menu()
    rows = SystemSetting.query.filter(
        SystemSetting.setting.startswith(MENU_PREFIX, autoescape=True)
    ).all()
    for row in rows:
        name = row.setting[len(MENU_PREFIX):]
        if name not in menu:
            continue
        try:
            stored = json.loads(row.value)
        except ValueError:
            current_app.logger.warning("Ignoring malformed menu setting %s", row.setting)
            continue
        if isinstance(stored, dict):
            menu[name].update(
                {key: stored[key] for key in ("enabled", "visible", "title") if key in stored}
            )
    return menu


@admin_bp.route("/menu-settings", methods=["GET"])
@jwt_required()
def get_menu_settings():
    """Return the full menu configuration."""

    _require_admin()
    return jsonify(load_menu_settings())


@admin_bp.route("/menu-settings", methods=["POST"])
@jwt_required()
def replace_menu_settings():
    """Replace the whole menu configuration; concurrent saves are last-write-wins."""

    admin = _require_admin()
    payload = parse_json_request(request)
    try:
        menu = validate_menu(payload)
    except ValueError as exc:
        raise BadRequest(str(exc)) from exc

    for name in MENU_SECTIONS:
        SystemSetting.upsert(
            f"{MENU_PREFIX}{name}",
            json.dumps(menu[name]),
            description=f"Menu configuration for {name}",
            updated_by=admin.id,
        )
    db.session.commit()

    current_app.logger.info("Menu settings replaced by admin %s", admin.id)
    return jsonify({"message": "Menu settings updated successfully"})


@admin_bp.route("/invitation/waitlist", methods=["GET"])
@jwt_required()
def list_waitlist():
    """Return waitlist applications, newest first."""

    _require_admin()
    entries = InvitationRequest.query.order_by(
        InvitationRequest.created_at.desc(), InvitationRequest.id.desc()
    ).all()
    return jsonify([entry.to_dict() for entry in entries])


@admin_bp.route("/invitation/settings", methods=["PUT"])
@jwt_required()
def update_invitation_settings():
    """Turn invitation-only client registration on or off."""

    admin = _require_admin()
    payload = parse_json_request(request, required_keys=("invitationOnly",))
    enabled = payload.get("invitationOnly")
    if not isinstance(enabled, bool):
        raise BadRequest("invitationOnly must be a boolean.")

    SystemSetting.upsert(
        INVITATION_ONLY_SETTING,
        "true" if enabled else "false",
        description="Require an invitation for client registration",
        updated_by=admin.id,
    )
    db.session.commit()
    return jsonify({"invitationOnly": invitation_only_enabled()})
