"""Base class for stateful dashboard components."""

from __future__ import annotations

import logging

from .api import ApiClient
from .notifications import Notifier

logger = logging.getLogger(__name__)


class Component:
    """Shared plumbing: an API client, a notifier and a closed flag.

    A closed component sends no further requests. Calls are synchronous, so a
    result can only arrive after ``close()`` when the component was closed
    from a callback during the request; subclasses check ``closed`` again
    before touching state once a request returns.
    """

    def __init__(self, api: ApiClient, notifier: Notifier):
        self.api = api
        self.notifier = notifier
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def _discard_if_closed(self, action: str) -> bool:
        if self.closed:
            logger.debug("%s finished after %s was closed; result dropped",
                         action, type(self).__name__)
            return True
        return False
