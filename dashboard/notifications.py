"""Toast-style notifications raised by dashboard components."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True)
class Notification:
    title: str
    description: str = ""
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


@dataclass
class Notifier:
    """Collects notifications and forwards them to an optional listener."""

    listener: Optional[Callable[[Notification], None]] = None
    history: list[Notification] = field(default_factory=list)
    max_history: int = MAX_HISTORY

    def toast(self, title: str, description: str = "", variant: str = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)
        # Oldest first; only the most recent are kept.
        del self.history[:-self.max_history]
        if notification.is_error:
            logger.warning("%s: %s", title, description)
        else:
            logger.info("%s: %s", title, description)
        if self.listener is not None:
            self.listener(notification)
        return notification

    def error(self, title: str, description: str = "") -> Notification:
        return self.toast(title, description, variant="destructive")

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
