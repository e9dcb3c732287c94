"""
Event Bus - in-process publish/subscribe for automation lifecycle events.

The dispatcher and the window registry announce what happened; the UI
websocket and the voice layer listen. Neither side knows about the other.

Events and payloads:
    window_opened         {"id", "type", "query", "platform"}
    window_closed         {"id", "type", "query"}
    all_windows_closed    {"count"}
    automation_started    {"intent_type", "original_text"}
    automation_completed  {"intent_type", "success", "action"?, "window_id"?, "error"?}
    music_started         {"window_id", "query", "song_name", "artist_name", "auto_mute"}
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger("voicepilot.services.events")

# ---------------------------------------------------------------------------
# EVENT NAMES
# ---------------------------------------------------------------------------
WINDOW_OPENED = "window_opened"
WINDOW_CLOSED = "window_closed"
ALL_WINDOWS_CLOSED = "all_windows_closed"
AUTOMATION_STARTED = "automation_started"
AUTOMATION_COMPLETED = "automation_completed"
MUSIC_STARTED = "music_started"

Subscriber = Callable[[str, Dict[str, Any]], None]


class EventBus:
    """
    Synchronous pub/sub channel.

    publish() calls every current subscriber in subscription order.
    A subscriber that raises is logged and skipped; the remaining
    subscribers still run and the publisher never sees the error.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe(lambda name, data: print(name, data))
        bus.publish(WINDOW_OPENED, {"id": "1700000000000", "type": "music"})
        unsubscribe()
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a disposer that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: str, payload: Dict[str, Any] = None) -> None:
        payload = payload or {}
        # Copy so subscribers may unsubscribe while being notified
        for subscriber in list(self._subscribers):
            try:
                subscriber(event, payload)
            except Exception as e:
                logger.warning(f"Event subscriber failed on '{event}': {e}")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
