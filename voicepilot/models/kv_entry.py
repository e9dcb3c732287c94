"""
KeyValueEntry model - one row per key in the durable key-value store.
Values are opaque strings (the statistics tracker stores JSON documents).
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from voicepilot.db.base import Base


class KeyValueEntry(Base):
    """
    SQLAlchemy ORM model for the 'kv_entries' table.

    Mirrors the get/set contract of a browser-style local store:
    a key maps to exactly one string value, last write wins.
    """

    __tablename__ = "kv_entries"

    # key: Storage key, e.g. "automationStats"
    key: Mapped[str] = mapped_column(String(200), primary_key=True)

    # value: Serialized payload; Text because statistics documents grow with history
    value: Mapped[str] = mapped_column(Text, nullable=False)

    # updated_at: Last write time, useful when inspecting the store by hand
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.key} ({len(self.value)} chars)>"
