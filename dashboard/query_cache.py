"""Cache of fetched API resources, keyed by endpoint path."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

_MISSING = object()


class QueryCache:
    """Holds fetched results until they are invalidated or the cache is cleared.

    Entries never expire on their own; a loader runs only for keys that are
    missing or were invalidated.
    """

    def __init__(self):
        self._entries: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def fetch(self, key: str, loader: Callable[[], Any]) -> Any:
        value = self._entries.get(key, _MISSING)
        if value is _MISSING:
            value = loader()
            self._entries[key] = value
        return value

    def invalidate(self, key: str) -> None:
        if self._entries.pop(key, _MISSING) is not _MISSING:
            logger.debug("Invalidated %s", key)

    def clear(self) -> None:
        self._entries.clear()
        logger.debug("Query cache cleared")
