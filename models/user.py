"""User model definition."""

from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


VERIFICATION_STATUSES = ("not_submitted", "pending", "verified", "rejected")
HEALTH_STATUSES = ("poor", "fair", "good", "great", "excellent")


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class User(db.Model):
    """Represents a platform user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="client")
    profile_image_url = db.Column(db.Text, nullable=True)
    is_active = db.Column(
        db.Boolean,
        nullable=False,
        default=True,
        server_default=db.text("true"),
    )
    is_banned = db.Column(db.Boolean, nullable=False, default=False)
    ban_reason = db.Column(db.Text, nullable=True)
    verification_status = db.Column(
        db.String(20),
        nullable=False,
        default="not_submitted",
        server_default=db.text("'not_submitted'"),
    )
    questionnaire_completed = db.Column(db.Boolean, nullable=False, default=False)
    questionnaire_completion_percentage = db.Column(
        db.Integer, nullable=False, default=0
    )
    questionnaire_health_status = db.Column(
        db.String(20), nullable=False, default="poor"
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    @property
    def can_authenticate(self) -> bool:
        return bool(self.is_active) and not self.is_banned

    def set_verification_status(self, status: str) -> None:
        if status not in VERIFICATION_STATUSES:
            raise ValueError(f"Unknown verification status: {status}")
        self.verification_status = status

    def to_dict(self) -> dict:
        """Serialize the user without credentials."""

        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
            "profileImageUrl": self.profile_image_url,
            "isActive": self.is_active,
            "isBanned": self.is_banned,
            "verificationStatus": self.verification_status,
            "questionnaireCompleted": self.questionnaire_completed,
            "questionnaireCompletionPercentage": self.questionnaire_completion_percentage,
            "questionnaireHealthStatus": self.questionnaire_health_status,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
