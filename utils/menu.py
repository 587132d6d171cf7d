"""Landing-page menu sections and their display rules."""

from __future__ import annotations

from typing import Mapping

MENU_SECTIONS = ("features", "how_it_works", "testimonials", "pricing", "auth", "cta")

DEFAULT_TITLES = {
    "features": "Features",
    "how_it_works": "How It Works",
    "testimonials": "Testimonials",
    "pricing": "Pricing",
    "auth": "Sign In",
    "cta": "Get Started",
}


def default_menu() -> dict[str, dict]:
    """Every section enabled and visible with its stock title."""

    return {
        name: {"enabled": True, "visible": True, "title": DEFAULT_TITLES[name]}
        for name in MENU_SECTIONS
    }


def section_status(section: Mapping) -> str:
    """Disabled wins over the visibility flag."""

    if not section.get("enabled"):
        return "Disabled"
    if not section.get("visible"):
        return "Hidden"
    return "Active"


def is_shown(section: Mapping) -> bool:
    return bool(section.get("enabled")) and bool(section.get("visible"))


def validate_menu(payload: object) -> dict[str, dict]:
    """Return a clean copy of a full menu object or raise ``ValueError``."""

    if not isinstance(payload, Mapping):
        raise ValueError("Menu settings must be an object.")

    missing = [name for name in MENU_SECTIONS if name not in payload]
    unknown = sorted(set(payload) - set(MENU_SECTIONS))
    if missing:
        raise ValueError("Missing menu sections: {}.".format(", ".join(missing)))
    if unknown:
        raise ValueError("Unknown menu sections: {}.".format(", ".join(unknown)))

    cleaned = {}
    for name in MENU_SECTIONS:
        section = payload[name]
        if not isinstance(section, Mapping):
            raise ValueError(f"Section '{name}' must be an object.")
        enabled = section.get("enabled")
        visible = section.get("visible")
        title = section.get("title")
        if not isinstance(enabled, bool) or not isinstance(visible, bool):
            raise ValueError(f"Section '{name}' needs boolean enabled and visible flags.")
        if not isinstance(title, str):
            raise ValueError(f"Section '{name}' needs a string title.")
        cleaned[name] = {"enabled": enabled, "visible": visible, "title": title}
    return cleaned
