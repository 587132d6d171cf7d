"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .password_reset_token import PasswordResetToken  # noqa: E402,F401
from .message import Message  # noqa: E402,F401
from .verification_document import VerificationDocument  # noqa: E402,F401
from .invitation_request import InvitationRequest  # noqa: E402,F401
from .contact_request import ContactRequest  # noqa: E402,F401
from .system_setting import SystemSetting  # noqa: E402,F401
from .questionnaire import ParticipantResponse, Question  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "PasswordResetToken",
    "Message",
    "VerificationDocument",
    "InvitationRequest",
    "ContactRequest",
    "SystemSetting",
    "Question",
    "ParticipantResponse",
]
