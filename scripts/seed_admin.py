"""Create or update the administrator account.

Credentials come from ``ADMIN_EMAIL`` / ``ADMIN_PASSWORD``; the script refuses
to run without a password so no default credentials end up in a database.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402

DEFAULT_ADMIN_EMAIL = "admin@fokushub360.com"


def seed_admin(email: str, password: str, first_name: str = "Admin", last_name: str = "User") -> tuple[User, str]:
    """Upsert the admin user; the caller commits."""

    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(email=email, first_name=first_name, last_name=last_name)
        db.session.add(admin)
        action = "created"
    else:
        action = "updated"
    admin.role = "admin"
    admin.is_active = True
    admin.is_banned = False
    admin.set_password(password)
    admin.set_verification_status("verified")
    return admin, action


def main() -> int:
    email = os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL).strip().lower()
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        print("ADMIN_PASSWORD must be set", file=sys.stderr)
        return 1

    app = create_app()
    with app.app_context():
        _, action = seed_admin(email, password)
        db.session.commit()
        app.logger.info("Admin user %s: %s", action, email)
    print(f"Admin user {action}: {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
