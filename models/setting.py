"""Setting model - key/value storage for application settings."""

from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, String, Text
from models import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Setting(Base):
    """One persisted setting.

    ``value`` is always text: strings are stored as-is and everything else
    as JSON, with ``value_type`` recording which. When ``is_encrypted`` is
    set, ``value`` holds an encryption envelope instead of the text itself.
    """

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    is_encrypted = Column(Boolean, nullable=False, default=False)
    value_type = Column(String(10), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Valid value types
    TYPE_STRING = "str"
    TYPE_JSON = "json"

    def to_dict(self) -> dict:
        """Convert to dictionary (value omitted when encrypted)."""
        return {
            "key": self.key,
            "value": None if self.is_encrypted else self.value,
            "is_encrypted": bool(self.is_encrypted),
            "value_type": self.value_type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
