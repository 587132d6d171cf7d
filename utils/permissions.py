"""Role capability checks shared by the API and the dashboard.

The server treats these as the authoritative rule; dashboard components call
the same functions only to decide what to display.
"""

from __future__ import annotations

from typing import Optional

ROLES = ("client", "participant", "manager", "admin")
SELF_SERVICE_ROLES = ("client", "participant")
STAFF_ROLES = frozenset({"admin", "manager"})
ADMIN_ROLES = frozenset({"admin"})


def _normalize(role: Optional[str]) -> str:
    return (role or "").strip().lower()


def is_staff(role: Optional[str]) -> bool:
    return _normalize(role) in STAFF_ROLES


def can_review_verification(role: Optional[str]) -> bool:
    """Admins and managers see verification badges and review documents."""
    return is_staff(role)


def can_send_messages(role: Optional[str]) -> bool:
    return is_staff(role)


def can_manage_participants(role: Optional[str]) -> bool:
    return is_staff(role)


def can_manage_settings(role: Optional[str]) -> bool:
    return _normalize(role) in ADMIN_ROLES
