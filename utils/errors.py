"""Helpers for HTTP errors that carry extra JSON fields."""

from __future__ import annotations

from werkzeug.exceptions import HTTPException


def with_payload(error: HTTPException, **payload) -> HTTPException:
    """Attach extra fields that the JSON error handler merges into the body."""

    error.payload = payload  # type: ignore[attr-defined]
    return error
