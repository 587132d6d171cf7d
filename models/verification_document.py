"""VerificationDocument model definition."""

from datetime import datetime

from . import db


DOCUMENT_TYPES = ("identity", "address", "income", "other")
DOCUMENT_STATUSES = ("pending", "verified", "rejected")


class VerificationDocument(db.Model):
    """Represents an uploaded identity document awaiting review."""

    __tablename__ = "verification_documents"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    doc_type = db.Column(db.String(20), nullable=False)
    file_name = db.Column(db.String(512), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    mime_type = db.Column(db.String(100), nullable=False)
    status = db.Column(
        db.String(20),
        nullable=False,
        default="pending",
        server_default=db.text("'pending'"),
    )
    reviewed_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    uploaded_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        server_default=db.func.now(),
    )
    reviewed_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship(
        "User",
        foreign_keys=[user_id],
        backref=db.backref("verification_documents", lazy="dynamic"),
    )

    def __repr__(self) -> str:
        return (
            f"<VerificationDocument id={self.id} user_id={self.user_id} "
            f"status={self.status}>"
        )

    def to_dict(self) -> dict:
        """Serialize the document the way the dashboard displays it."""

        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.doc_type,
            "name": self.original_name,
            "fileSize": self.file_size,
            "mimeType": self.mime_type,
            "status": self.status,
            "uploadDate": self.uploaded_at.isoformat() if self.uploaded_at else None,
            "reviewedBy": self.reviewed_by,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "rejectionReason": self.rejection_reason,
        }
