"""
Tests for the statistics tracker.

These tests verify:
- Counters and the total == successful + failed invariant
- Per-day buckets and per-type counts
- Success rate formatting
- Bounded history
- Persistence round trip, and that persistence failures never propagate
"""

import json
import threading
from datetime import date

import pytest

from voicepilot.services.errors import PersistenceFailure
from voicepilot.services.kv_store import InMemoryKeyValueStore, KeyValueStore
from voicepilot.services.statistics import StatisticsTracker, format_success_rate

TODAY = date(2026, 10, 19)


class BrokenStore(KeyValueStore):
    """Store whose every call fails, like a full disk or a locked database."""

    def get(self, key):
        raise PersistenceFailure("read failed")

    def set(self, key, value):
        raise PersistenceFailure("write failed")


class DiskFullStore(KeyValueStore):
    """Store that fails below the persistence layer, with an OS error."""

    def get(self, key):
        raise OSError("disk full")

    def set(self, key, value):
        raise OSError("disk full")


class TestSuccessRate:

    def test_no_executions_is_100_percent(self, tracker):
        assert tracker.snapshot().success_rate == "100%"

    def test_seven_of_ten(self, tracker):
        for i in range(10):
            tracker.record("music", success=i < 7)

        assert tracker.snapshot().success_rate == "70%"

    @pytest.mark.parametrize("successful,total,expected", [
        (1, 3, "33%"),
        (2, 3, "67%"),
        (1, 8, "13%"),
        (0, 5, "0%"),
    ])
    def test_rounding(self, successful, total, expected):
        assert format_success_rate(successful, total) == expected


class TestRecord:

    def test_counters(self, tracker):
        tracker.record("music", success=True, query="despacito")
        tracker.record("shopping", success=False, error="Failed to execute shopping command: blocked")

        snapshot = tracker.snapshot()
        assert snapshot.total_executions == 2
        assert snapshot.successful_executions == 1
        assert snapshot.failed_executions == 1
        assert snapshot.total_executions == snapshot.successful_executions + snapshot.failed_executions

    def test_daily_bucket(self, tracker):
        tracker.record("music", success=True)
        tracker.record("music", success=False)
        tracker.record("search", success=True)

        snapshot = tracker.snapshot()
        bucket = snapshot.daily_stats[TODAY.isoformat()]
        assert bucket["total"] == 3
        assert bucket["types"] == {"music": 2, "search": 1}
        assert snapshot.today_executions == 3
        assert snapshot.today_successful == 2
        assert snapshot.today_failed == 1

    def test_history_most_recent_first(self, tracker):
        tracker.record("music", success=True, query="first")
        tracker.record("search", success=True, query="second")

        history = tracker.snapshot().execution_history
        assert [entry["query"] for entry in history] == ["second", "first"]

    def test_history_is_bounded(self, store):
        tracker = StatisticsTracker(store, history_limit=3, today=lambda: TODAY)

        for i in range(5):
            tracker.record("music", success=True, query=f"q{i}")

        history = tracker.snapshot().execution_history
        assert [entry["query"] for entry in history] == ["q4", "q3", "q2"]
        assert tracker.snapshot().total_executions == 5

    def test_concurrent_records_keep_invariant(self, tracker):
        def worker(success):
            for _ in range(50):
                tracker.record("music", success=success)

        threads = [threading.Thread(target=worker, args=(i % 2 == 0,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = tracker.snapshot()
        assert snapshot.total_executions == 200
        assert snapshot.successful_executions == 100
        assert snapshot.failed_executions == 100


class TestPersistence:

    def test_persisted_after_every_record(self, tracker, store):
        tracker.record("music", success=True)

        document = json.loads(store.get(tracker.storage_key))
        assert document["total_executions"] == 1
        assert TODAY.isoformat() in document["daily_stats"]

    def test_round_trip(self, tracker, store):
        tracker.record("music", success=True, query="despacito")
        tracker.record("phone", success=False, error="boom")

        restored = StatisticsTracker(store, today=lambda: TODAY)

        assert restored.load() is True
        assert restored.snapshot() == tracker.snapshot()

    def test_load_derives_total(self, store):
        store.set("automationStats", json.dumps({
            "total_executions": 99,
            "successful_executions": 3,
            "failed_executions": 1,
        }))
        tracker = StatisticsTracker(store, storage_key="automationStats", today=lambda: TODAY)

        tracker.load()

        assert tracker.snapshot().total_executions == 4

    def test_load_nothing_stored(self, tracker):
        assert tracker.load() is False
        assert tracker.snapshot().total_executions == 0

    def test_load_unreadable_document(self):
        store = InMemoryKeyValueStore({"automationStats": "{not json"})
        tracker = StatisticsTracker(store, storage_key="automationStats")

        assert tracker.load() is False

    def test_persistence_failure_is_swallowed(self):
        tracker = StatisticsTracker(BrokenStore(), today=lambda: TODAY)

        tracker.record("music", success=True)

        assert tracker.snapshot().total_executions == 1
        assert tracker.load() is False

    def test_unexpected_store_error_is_swallowed(self):
        tracker = StatisticsTracker(DiskFullStore(), today=lambda: TODAY)

        tracker.record("shopping", success=True, query="iPhone")

        assert tracker.snapshot().successful_executions == 1
        assert tracker.load() is False
