"""Route-side enforcement of the shared capability checks."""

from __future__ import annotations

from typing import Callable, Optional

from flask_jwt_extended import current_user
from werkzeug.exceptions import Forbidden

from models.user import User


def require_capability(
    check: Callable[[Optional[str]], bool],
    message: str = "You do not have permission to perform this action.",
) -> User:
    """Return the signed-in user or raise 403 when ``check`` denies their role.

    Must run inside a ``jwt_required`` view.
    """

    user = current_user
    if not check(user.role):
        raise Forbidden(message)
    return user
