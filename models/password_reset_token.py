"""Password reset token model."""

from datetime import datetime

from . import db


class PasswordResetToken(db.Model):
    """Single-use token emailed to a user who forgot their password."""

    __tablename__ = "password_reset_tokens"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    token = db.Column(db.String(128), unique=True, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    is_used = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User")

    def is_valid(self, now=None) -> bool:
        """Return True while the token is unused and not expired."""

        now = now or datetime.utcnow()
        return not self.is_used and self.expires_at > now
