"""Questionnaire completion scoring."""

from __future__ import annotations

COMPLETION_THRESHOLD = 80

# Checked top-down; the first threshold the percentage reaches wins.
HEALTH_THRESHOLDS = (
    (90, "excellent"),
    (75, "great"),
    (50, "good"),
    (25, "fair"),
)


def completion_percentage(responses: int, questions: int) -> int:
    """Return the rounded share of answered questions, 0 when none exist."""

    if questions <= 0:
        return 0
    return round(responses / questions * 100)


def health_status(percentage: int) -> str:
    for threshold, status in HEALTH_THRESHOLDS:
        if percentage >= threshold:
            return status
    return "poor"


def is_completed(percentage: int) -> bool:
    return percentage >= COMPLETION_THRESHOLD
