"""SQLAlchemy ORM models."""

from voicepilot.models.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]
