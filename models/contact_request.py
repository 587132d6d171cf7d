"""Contact form submission model."""

from datetime import datetime

from . import db


class ContactRequest(db.Model):
    """Message left through the public contact form."""

    __tablename__ = "contact_requests"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(50), nullable=True)
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "category": self.category,
            "message": self.message,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
