"""Seed demo users, menu settings and a welcome message.

Running the script twice leaves the database in the same state.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.message import Message  # noqa: E402
from models.system_setting import SystemSetting  # noqa: E402
from models.user import User  # noqa: E402
from routes.admin import MENU_PREFIX  # noqa: E402
from utils.menu import MENU_SECTIONS, default_menu  # noqa: E402

DEMO_PASSWORD = "DemoPass123"
DEMO_USERS = (
    ("manager@example.com", "manager", "Morgan", "Manager", "verified"),
    ("client@example.com", "client", "Casey", "Client", "not_submitted"),
    ("participant@example.com", "participant", "Pat", "Participant", "pending"),
)
WELCOME_SUBJECT = "Welcome to FokusHub360"


def get_or_create_user(
    email: str, role: str, first_name: str, last_name: str, status: str
) -> User:
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email)
        db.session.add(user)
    user.role = role
    user.first_name = first_name
    user.last_name = last_name
    user.set_password(DEMO_PASSWORD)
    user.set_verification_status(status)
    return user


def seed_menu(updated_by: int | None = None) -> None:
    menu = default_menu()
    for name in MENU_SECTIONS:
        key = f"{MENU_PREFIX}{name}"
        if SystemSetting.get_value(key) is None:
            SystemSetting.upsert(
                key,
                json.dumps(menu[name]),
                description=f"Menu configuration for {name}",
                updated_by=updated_by,
            )


def seed() -> dict[str, User]:
    users = {role: get_or_create_user(email, role, first, last, status)
             for email, role, first, last, status in DEMO_USERS}
    db.session.flush()

    seed_menu(updated_by=users["manager"].id)

    participant = users["participant"]
    existing = Message.query.filter_by(
        recipient_id=participant.id, subject=WELCOME_SUBJECT
    ).first()
    if existing is None:
        db.session.add(
            Message(
                sender_id=users["manager"].id,
                recipient_id=participant.id,
                subject=WELCOME_SUBJECT,
                content="Thanks for joining. Upload your documents to get verified.",
                message_type="system",
                priority="normal",
            )
        )
    db.session.commit()
    return users


def main() -> None:
    app = create_app()
    with app.app_context():
        users = seed()
        app.logger.info("Seeded demo users: %s", ", ".join(u.email for u in users.values()))
    print("Seed data inserted: manager, client, participant, menu settings, welcome message.")


if __name__ == "__main__":
    main()
