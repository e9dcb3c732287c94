"""
Statistics Tracker - running counters over every automation dispatch.

Keeps:
- Global totals (total / successful / failed)
- Per-day buckets keyed by local calendar date, each with a per-type count
- A bounded execution history, most recent first

Invariant: total_executions == successful_executions + failed_executions,
and the per-day totals add up to the global total.

The whole state is persisted to the key-value store after every record()
and read back by load() at startup. Persistence problems are logged and
never reach the dispatcher.
"""

import json
import logging
import math
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from voicepilot.core.config import settings
from voicepilot.services.kv_store import KeyValueStore

logger = logging.getLogger("voicepilot.services.statistics")


# ---------------------------------------------------------------------------
# STATE
# ---------------------------------------------------------------------------

@dataclass
class ExecutionRecord:
    """One history entry."""
    id: int
    intent: str
    query: Optional[str]
    timestamp: str
    success: bool
    error: Optional[str] = None


@dataclass
class DailyStats:
    total: int = 0
    successful: int = 0
    failed: int = 0
    types: Dict[str, int] = field(default_factory=dict)


class StatisticsSnapshot(BaseModel):
    """Read-only view of the tracker, with today's numbers and the success rate."""
    total_executions: int
    successful_executions: int
    failed_executions: int
    execution_history: List[Dict[str, Any]] = Field(default_factory=list)
    daily_stats: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    today_executions: int = 0
    today_successful: int = 0
    today_failed: int = 0
    success_rate: str = Field(description='Rounded percentage, e.g. "70%"')


def format_success_rate(successful: int, total: int) -> str:
    """Rounded percentage (halves round up); "100%" when nothing ran yet."""
    if total == 0:
        return "100%"
    return f"{math.floor(successful / total * 100 + 0.5)}%"


# ---------------------------------------------------------------------------
# TRACKER
# ---------------------------------------------------------------------------

class StatisticsTracker:
    """
    Tracks automation outcomes and persists them.

    Updates are serialized with a lock so concurrent dispatches keep the
    totals consistent.

    Usage:
        tracker = StatisticsTracker(SqlKeyValueStore())
        tracker.load()
        tracker.record("music", success=True, query="despacito")
        tracker.snapshot().success_rate    # "100%"
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: Optional[str] = None,
        history_limit: Optional[int] = None,
        today: Callable[[], date] = date.today,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.storage_key = storage_key or settings.STATS_STORAGE_KEY
        self.history_limit = history_limit or settings.STATS_HISTORY_LIMIT
        self._today = today
        self._clock = clock
        self._lock = Lock()
        self._reset()

    def _reset(self) -> None:
        self.total_executions = 0
        self.successful_executions = 0
        self.failed_executions = 0
        self.execution_history: List[ExecutionRecord] = []
        self.daily_stats: Dict[str, DailyStats] = {}

    # -----------------------------------------------------------------------
    # RECORDING
    # -----------------------------------------------------------------------

    def record(
        self,
        intent_type: str,
        success: bool,
        error: Optional[str] = None,
        query: Optional[str] = None,
    ) -> None:
        """Fold one dispatch outcome into the counters, then persist."""
        now = self._clock()
        day_key = self._today().isoformat()

        with self._lock:
            self.total_executions += 1
            if success:
                self.successful_executions += 1
            else:
                self.failed_executions += 1

            daily = self.daily_stats.setdefault(day_key, DailyStats())
            daily.total += 1
            if success:
                daily.successful += 1
            else:
                daily.failed += 1
            daily.types[intent_type] = daily.types.get(intent_type, 0) + 1

            self.execution_history.insert(0, ExecutionRecord(
                id=int(now.timestamp() * 1000),
                intent=intent_type,
                query=query,
                timestamp=now.isoformat(),
                success=success,
                error=error,
            ))
            del self.execution_history[self.history_limit:]

            self.persist()

    # -----------------------------------------------------------------------
    # READING
    # -----------------------------------------------------------------------

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            today = self.daily_stats.get(self._today().isoformat(), DailyStats())
            return StatisticsSnapshot(
                total_executions=self.total_executions,
                successful_executions=self.successful_executions,
                failed_executions=self.failed_executions,
                execution_history=[asdict(entry) for entry in self.execution_history],
                daily_stats={day: asdict(stats) for day, stats in self.daily_stats.items()},
                today_executions=today.total,
                today_successful=today.successful,
                today_failed=today.failed,
                success_rate=format_success_rate(self.successful_executions, self.total_executions),
            )

    # -----------------------------------------------------------------------
    # PERSISTENCE
    # -----------------------------------------------------------------------

    def _to_document(self) -> Dict[str, Any]:
        return {
            "total_executions": self.total_executions,
            "successful_executions": self.successful_executions,
            "failed_executions": self.failed_executions,
            "execution_history": [asdict(entry) for entry in self.execution_history],
            "daily_stats": {day: asdict(stats) for day, stats in self.daily_stats.items()},
        }

    def persist(self) -> None:
        """Write the full state to the store. Failures are logged, not raised."""
        try:
            self.store.set(self.storage_key, json.dumps(self._to_document()))
        except Exception as e:
            logger.warning(f"Failed to save automation stats: {e}")

    def load(self) -> bool:
        """
        Replace the in-memory state with the stored document.

        Returns False (and keeps the current state) when nothing is stored
        or the stored document cannot be read.
        """
        try:
            raw = self.store.get(self.storage_key)
        except Exception as e:
            logger.warning(f"Failed to load automation stats: {e}")
            return False

        if not raw:
            return False

        try:
            data = json.loads(raw)
            history = [ExecutionRecord(**entry) for entry in data.get("execution_history", [])]
            daily = {
                day: DailyStats(**stats)
                for day, stats in data.get("daily_stats", {}).items()
            }
            successful = int(data.get("successful_executions", 0))
            failed = int(data.get("failed_executions", 0))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable automation stats: {e}")
            return False

        with self._lock:
            self.successful_executions = successful
            self.failed_executions = failed
            # Derived, so a hand-edited document cannot break the sum
            self.total_executions = successful + failed
            self.execution_history = history[: self.history_limit]
            self.daily_stats = daily

        logger.info(f"Loaded automation stats ({self.total_executions} executions)")
        return True
