"""Key/value system settings."""

from datetime import datetime

from . import db


class SystemSetting(db.Model):
    """A named platform setting; menu entries store JSON in ``value``."""

    __tablename__ = "system_settings"

    id = db.Column(db.Integer, primary_key=True)
    setting = db.Column(db.String(100), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @classmethod
    def get_value(cls, setting: str, default=None):
        row = cls.query.filter_by(setting=setting).first()
        return row.value if row is not None else default

    @classmethod
    def upsert(cls, setting: str, value: str, description=None, updated_by=None):
        """Create or overwrite a setting; the caller commits."""

        row = cls.query.filter_by(setting=setting).first()
        if row is None:
            row = cls(setting=setting)
            db.session.add(row)
        row.value = value
        row.description = description
        row.updated_by = updated_by
        return row
