"""Outgoing email delivery."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class OutgoingEmail:
    sender: str
    to: str
    subject: str
    body: str


class Mailer(ABC):
    """Interface for email delivery backends."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> None:
        """Deliver a plain-text email."""


@dataclass
class LogMailer(Mailer):
    """Writes emails to the log and keeps them in an in-memory outbox."""

    sender: str
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))
    outbox: list[OutgoingEmail] = field(default_factory=list)

    def send(self, to: str, subject: str, body: str) -> None:
        email = OutgoingEmail(sender=self.sender, to=to, subject=subject, body=body)
        self.outbox.append(email)
        self.logger.info("Email queued for %s: %s", to, subject)
