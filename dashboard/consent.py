"""Cookie consent banner state."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from .local_store import CONSENT_KEY, CONSENT_SETTINGS_KEY, LocalStore

logger = logging.getLogger(__name__)


@dataclass
class CookieSettings:
    necessary: bool = True
    analytics: bool = False
    marketing: bool = False
    preferences: bool = False


class CookieConsent:
    """Stores the visitor's choice; necessary cookies cannot be turned off."""

    def __init__(self, store: LocalStore):
        self.store = store

    @property
    def decision(self) -> Optional[str]:
        return self.store.get(CONSENT_KEY)

    def should_show_banner(self) -> bool:
        return self.decision is None

    def settings(self) -> CookieSettings:
        raw = self.store.get(CONSENT_SETTINGS_KEY)
        if not raw:
            return CookieSettings()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unreadable cookie settings")
            return CookieSettings()
        if not isinstance(data, dict):
            logger.warning("Ignoring cookie settings that are not an object")
            return CookieSettings()
        known = {key: bool(data[key]) for key in asdict(CookieSettings()) if key in data}
        known["necessary"] = True
        return CookieSettings(**known)

    def _save(self, decision: str, settings: CookieSettings) -> CookieSettings:
        settings.necessary = True
        self.store.set(CONSENT_KEY, decision)
        self.store.set(CONSENT_SETTINGS_KEY, json.dumps(asdict(settings)))
        return settings

    def accept_all(self) -> CookieSettings:
        return self._save(
            "accepted",
            CookieSettings(analytics=True, marketing=True, preferences=True),
        )

    def reject_all(self) -> CookieSettings:
        return self._save("rejected", CookieSettings())

    def save_preferences(
        self, analytics: bool = False, marketing: bool = False, preferences: bool = False
    ) -> CookieSettings:
        return self._save(
            "customized",
            CookieSettings(analytics=analytics, marketing=marketing, preferences=preferences),
        )
