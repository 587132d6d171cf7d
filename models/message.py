"""Message model definition."""

from datetime import datetime

from . import db


MESSAGE_TYPES = ("general", "warning", "campaign_invite", "system")
PRIORITIES = ("low", "normal", "high", "urgent")


class Message(db.Model):
    """A direct message from staff to a user."""

    __tablename__ = "messages"

    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    recipient_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    subject = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    message_type = db.Column(db.String(50), nullable=False, default="general")
    priority = db.Column(db.String(20), nullable=False, default="normal")
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    read_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    sender = db.relationship("User", foreign_keys=[sender_id])
    recipient = db.relationship("User", foreign_keys=[recipient_id])

    def mark_read(self, now=None) -> None:
        if self.is_read:
            return
        self.is_read = True
        self.read_at = now or datetime.utcnow()

    def to_dict(self) -> dict:
        sender = self.sender
        return {
            "id": self.id,
            "senderId": self.sender_id,
            "recipientId": self.recipient_id,
            "senderName": (
                " ".join(part for part in (sender.first_name, sender.last_name) if part)
                if sender
                else None
            ),
            "subject": self.subject,
            "content": self.content,
            "messageType": self.message_type,
            "priority": self.priority,
            "isRead": self.is_read,
            "readAt": self.read_at.isoformat() if self.read_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
