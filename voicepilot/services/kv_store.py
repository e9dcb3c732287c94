"""
Durable Key-Value Store - string values under string keys, last write wins.

Used by the statistics tracker to persist its document between runs.

- SqlKeyValueStore: one row per key in the kv_entries table (SQLAlchemy)
- InMemoryKeyValueStore: a dict, for tests and throwaway processes

Both raise PersistenceFailure on I/O errors; callers decide whether
that matters (the statistics tracker logs it and moves on).
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voicepilot.db.session import SessionLocal
from voicepilot.models.kv_entry import KeyValueEntry
from voicepilot.services.errors import PersistenceFailure

logger = logging.getLogger("voicepilot.services.kv_store")


class KeyValueStore(ABC):
    """get/set contract of a browser-style local store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass


class InMemoryKeyValueStore(KeyValueStore):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqlKeyValueStore(KeyValueStore):
    """
    Key-value store backed by the kv_entries table.

    Each call opens and closes its own session, so the store can be
    shared by the whole process.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as db:
                entry = db.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Failed to read '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with self.session_factory() as db:
                entry = db.get(KeyValueEntry, key)
                if entry is None:
                    db.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                    entry.updated_at = datetime.now(timezone.utc)
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Failed to write '{key}': {e}") from e
        logger.debug(f"Stored '{key}' ({len(value)} chars)")
