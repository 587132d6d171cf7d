"""Tests for the admin menu control panel."""

from __future__ import annotations

import json

import httpx
import pytest

from dashboard.menu_panel import MENU_SETTINGS_KEY, MenuControlPanel
from utils.menu import MENU_SECTIONS, default_menu


@pytest.fixture()
def server_menu():
    return default_menu()


@pytest.fixture()
def menu_backend(mock_api, server_menu):
    """Serve the menu from ``server_menu``; POST replaces it unless ``fail`` is set."""

    state = {"fail": False}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=server_menu)
        if state["fail"]:
            return httpx.Response(500, json={"detail": "Failed to update menu settings"})
        server_menu.clear()
        server_menu.update(json.loads(request.content))
        return httpx.Response(200, json={"message": "Menu settings updated successfully"})

    api, transport = mock_api(handler)
    return api, transport, state


@pytest.fixture()
def panel(menu_backend, cache, notifier):
    api, _, _ = menu_backend
    panel = MenuControlPanel(api, cache, notifier)
    panel.load()
    return panel


def test_load_builds_draft_from_server(panel):
    assert list(panel.draft) == list(MENU_SECTIONS)
    assert panel.preview() == [
        "Features",
        "How It Works",
        "Testimonials",
        "Pricing",
        "Sign In",
        "Get Started",
    ]
    assert panel.has_visible_items


def test_refresh_never_overwrites_edits(panel, server_menu):
    panel.set_title("features", "Local Edit")
    server_menu["features"]["title"] = "Remote Edit"

    panel.refresh()

    assert panel.draft["features"].title == "Local Edit"


def test_disabling_keeps_visible_flag_and_wins_status(panel):
    panel.set_enabled("pricing", False)

    assert panel.draft["pricing"].visible is True
    assert panel.status_text("pricing") == "Disabled"
    assert panel.status_color("pricing") == "red"
    assert panel.visibility_toggle_enabled("pricing") is False
    assert panel.set_visible("pricing", False) is False
    assert panel.draft["pricing"].visible is True
    assert "Pricing" not in panel.preview()


def test_hidden_section_status(panel):
    assert panel.set_visible("auth", False) is True

    assert panel.status_text("auth") == "Hidden"
    assert panel.status_color("auth") == "yellow"
    assert panel.status_text("cta") == "Active"
    assert panel.status_color("cta") == "green"
    assert "Sign In" not in panel.preview()


def test_enable_and_disable_all_set_both_flags(panel):
    panel.disable_all()

    assert all(not s.enabled and not s.visible for s in panel.draft.values())
    assert panel.preview() == []
    assert panel.has_visible_items is False

    panel.enable_all()
    assert all(s.enabled and s.visible for s in panel.draft.values())


def test_enable_all_then_disable_all_leaves_everything_off(panel, menu_backend):
    _, transport, _ = menu_backend
    panel.set_enabled("pricing", False)
    panel.set_visible("cta", False)

    panel.enable_all()
    panel.disable_all()

    assert {
        name: (s.enabled, s.visible) for name, s in panel.draft.items()
    } == {name: (False, False) for name in MENU_SECTIONS}
    assert panel.preview() == []
    assert transport.count("POST", MENU_SETTINGS_KEY) == 0


def test_unknown_section_raises(panel):
    with pytest.raises(KeyError):
        panel.update_section("blog", enabled=False)


def test_save_sends_whole_object_and_invalidates(panel, menu_backend, cache, notifier, server_menu):
    _, transport, _ = menu_backend
    panel.set_title("cta", "Join Now")
    panel.set_enabled("testimonials", False)

    assert panel.save() is True

    posted = json.loads(transport.requests[-1].content)
    assert set(posted) == set(MENU_SECTIONS)
    assert posted["cta"] == {"enabled": True, "visible": True, "title": "Join Now"}
    assert server_menu["testimonials"]["enabled"] is False
    assert MENU_SETTINGS_KEY not in cache
    assert notifier.last.title == "Success"
    assert panel.saving is False


def test_failed_save_keeps_draft_and_shows_error(panel, menu_backend, notifier):
    _, _, state = menu_backend
    state["fail"] = True
    panel.set_title("features", "Unsaved")

    assert panel.save() is False

    assert panel.draft["features"].title == "Unsaved"
    assert notifier.last.is_error
    assert notifier.last.description == "Failed to update menu settings"


def test_load_failure_notifies(mock_api, cache, notifier):
    api, _ = mock_api(lambda request: httpx.Response(403, json={"detail": "Admin privileges required."}))
    panel = MenuControlPanel(api, cache, notifier)

    assert panel.load() is None
    assert panel.save() is False
    assert notifier.last.is_error
    assert notifier.last.description == "Admin privileges required."


def test_closed_panel_does_not_save(panel, menu_backend, notifier):
    _, transport, _ = menu_backend
    before = len(notifier.history)
    panel.set_title("cta", "Never Sent")
    panel.close()

    assert panel.save() is False
    assert transport.count("POST", MENU_SETTINGS_KEY) == 0
    assert len(notifier.history) == before


def test_panel_closed_during_save_drops_result(mock_api, cache, notifier, server_menu):
    panels = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=server_menu)
        panels[0].close()
        return httpx.Response(200, json={"message": "Menu settings updated successfully"})

    api, transport = mock_api(handler)
    panel = MenuControlPanel(api, cache, notifier)
    panels.append(panel)
    panel.load()

    assert panel.save() is True
    assert transport.count("POST", MENU_SETTINGS_KEY) == 1
    assert MENU_SETTINGS_KEY not in cache
    assert notifier.history == []
