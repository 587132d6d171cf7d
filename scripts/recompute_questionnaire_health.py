"""Recompute questionnaire completion and health for participants."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import func  # noqa: E402

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.questionnaire import ParticipantResponse, Question  # noqa: E402
from models.user import User  # noqa: E402
from utils.questionnaire import completion_percentage, health_status, is_completed  # noqa: E402

logger = logging.getLogger("recompute_questionnaire_health")


@dataclass
class HealthChange:
    email: str
    old_percentage: int
    new_percentage: int
    old_status: str
    new_status: str
    completed: bool

    @property
    def changed(self) -> bool:
        return (
            self.old_percentage != self.new_percentage
            or self.old_status != self.new_status
        )


def recompute(email: Optional[str] = None, dry_run: bool = False) -> list[HealthChange]:
    """Update participants in place and return one entry per participant checked."""

    query = User.query.filter_by(role="participant")
    if email:
        query = query.filter(func.lower(User.email) == email.strip().lower())

    total_questions = Question.query.count()
    changes = []
    for user in query.order_by(User.id).all():
        answered = (
            db.session.query(func.count(func.distinct(ParticipantResponse.question_id)))
            .filter(ParticipantResponse.user_id == user.id)
            .scalar()
        ) or 0
        percentage = completion_percentage(answered, total_questions)
        change = HealthChange(
            email=user.email,
            old_percentage=user.questionnaire_completion_percentage,
            new_percentage=percentage,
            old_status=user.questionnaire_health_status,
            new_status=health_status(percentage),
            completed=is_completed(percentage),
        )
        changes.append(change)
        if change.changed:
            logger.info(
                "%s: %s%% (%s) -> %s%% (%s)",
                user.email,
                change.old_percentage,
                change.old_status,
                change.new_percentage,
                change.new_status,
            )
        if not dry_run:
            user.questionnaire_completion_percentage = percentage
            user.questionnaire_health_status = change.new_status
            user.questionnaire_completed = change.completed

    if dry_run:
        db.session.rollback()
    else:
        db.session.commit()
    return changes


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--email", help="Only recompute this participant")
    parser.add_argument(
        "--dry-run", action="store_true", help="Report changes without saving them"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    app = create_app()
    with app.app_context():
        changes = recompute(email=args.email, dry_run=args.dry_run)

    if args.email and not changes:
        logger.error("No participant found with email %s", args.email)
        return 1
    updated = sum(1 for change in changes if change.changed)
    logger.info(
        "Checked %d participant(s), %d changed%s",
        len(changes),
        updated,
        " (dry run)" if args.dry_run else "",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
