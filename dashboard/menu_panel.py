"""Admin panel for the landing-page menu sections."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from utils.menu import MENU_SECTIONS, is_shown, section_status

from .api import ApiClient, ApiError
from .component import Component
from .notifications import Notifier
from .query_cache import QueryCache

logger = logging.getLogger(__name__)

MENU_SETTINGS_KEY = "/api/admin/menu-settings"

STATUS_COLORS = {"Disabled": "red", "Hidden": "yellow", "Active": "green"}


@dataclass
class MenuSection:
    enabled: bool
    visible: bool
    title: str

    @property
    def status(self) -> str:
        return section_status(asdict(self))

    @property
    def shown(self) -> bool:
        return is_shown(asdict(self))


def _sections_from_payload(payload: dict) -> dict[str, MenuSection]:
    return {
        name: MenuSection(
            enabled=bool(payload[name].get("enabled")),
            visible=bool(payload[name].get("visible")),
            title=str(payload[name].get("title", "")),
        )
        for name in MENU_SECTIONS
        if isinstance(payload.get(name), dict)
    }


class MenuControlPanel(Component):
    """Edits a local draft of the menu settings and saves it as one object.

    The draft is taken from the first successful fetch only; later refetches
    update the cache but leave in-progress edits alone.
    """

    def __init__(self, api: ApiClient, cache: QueryCache, notifier: Notifier):
        super().__init__(api, notifier)
        self.cache = cache
        self.draft: Optional[dict[str, MenuSection]] = None
        self.saving = False

    def load(self) -> Optional[dict[str, MenuSection]]:
        try:
            fetched = self.cache.fetch(
                MENU_SETTINGS_KEY, lambda: self.api.get(MENU_SETTINGS_KEY)
            )
        except ApiError as exc:
            if not self._discard_if_closed("load"):
                self.notifier.error(
                    "Error", exc.message or "Failed to load menu settings"
                )
            return self.draft

        if self.draft is None and isinstance(fetched, dict) and not self.closed:
            self.draft = _sections_from_payload(fetched)
        return self.draft

    def refresh(self) -> Optional[dict[str, MenuSection]]:
        self.cache.invalidate(MENU_SETTINGS_KEY)
        return self.load()

    def _section(self, name: str) -> Optional[MenuSection]:
        if self.draft is None:
            return None
        if name not in self.draft:
            raise KeyError(f"Unknown menu section: {name}")
        return self.draft[name]

    def update_section(
        self,
        name: str,
        enabled: Optional[bool] = None,
        visible: Optional[bool] = None,
        title: Optional[str] = None,
    ) -> None:
        """Change leaf fields of one section in the draft."""

        section = self._section(name)
        if section is None:
            return
        if enabled is not None:
            section.enabled = enabled
        if visible is not None:
            section.visible = visible
        if title is not None:
            section.title = title

    def set_enabled(self, name: str, enabled: bool) -> None:
        # The stored visible flag is left as is in both directions.
        self.update_section(name, enabled=enabled)

    def visibility_toggle_enabled(self, name: str) -> bool:
        section = self._section(name)
        return bool(section and section.enabled)

    def set_visible(self, name: str, visible: bool) -> bool:
        """Flip visibility; ignored while the section is disabled."""

        if not self.visibility_toggle_enabled(name):
            return False
        self.update_section(name, visible=visible)
        return True

    def set_title(self, name: str, title: str) -> None:
        self.update_section(name, title=title)

    def _apply_all(self, value: bool) -> None:
        if self.draft is None:
            return
        for section in self.draft.values():
            section.enabled = value
            section.visible = value

    def enable_all(self) -> None:
        self._apply_all(True)

    def disable_all(self) -> None:
        self._apply_all(False)

    def status_text(self, name: str) -> str:
        section = self._section(name)
        return section.status if section else ""

    def status_color(self, name: str) -> str:
        return STATUS_COLORS.get(self.status_text(name), "")

    def preview(self) -> list[str]:
        """Titles the landing-page menu would show, in section order."""

        if self.draft is None:
            return []
        return [
            self.draft[name].title
            for name in MENU_SECTIONS
            if name in self.draft and self.draft[name].shown
        ]

    @property
    def has_visible_items(self) -> bool:
        return bool(self.preview())

    def to_payload(self) -> dict:
        return {name: asdict(section) for name, section in (self.draft or {}).items()}

    def save(self) -> bool:
        """Send the whole draft; the draft is kept as is when saving fails."""

        if self.draft is None or self.saving or self.closed:
            return False

        self.saving = True
        try:
            self.api.post(MENU_SETTINGS_KEY, json=self.to_payload())
        except ApiError as exc:
            if not self._discard_if_closed("save"):
                self.notifier.error(
                    "Error", exc.message or "Failed to update menu settings"
                )
            return False
        finally:
            self.saving = False

        self.cache.invalidate(MENU_SETTINGS_KEY)
        if not self._discard_if_closed("save"):
            self.notifier.toast("Success", "Menu settings updated successfully")
        return True
