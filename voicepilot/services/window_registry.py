"""
Window Registry - owns every external window the automations opened.

Once a handler hands a handle to track(), the registry is its only owner:
nothing else closes, navigates or polls it. Each tracked entry gets its
own liveness poll (an asyncio.Task) that evicts the entry and announces
window_closed as soon as the opener reports the window closed.

Liveness is advisory. When the opener cannot inspect a handle (it raises),
the window is treated as "unknown, assume open" and the next poll tries again.
Each poll tick also refreshes the focused flag from the opener, when it can tell.
minimized stays False: browser pages do not expose it.

Lifecycle of an entry:

    track() ──► polled every WINDOW_POLL_INTERVAL_SECONDS
                    │
                    ├── opener reports closed ──► evicted, window_closed
                    ├── close(id) ──────────────► closed, evicted, window_closed
                    └── close_all() ────────────► closed, evicted, window_closed
                                                  (+ one all_windows_closed)
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from voicepilot.core.config import settings
from voicepilot.environments.browser.opener import ResourceOpener
from voicepilot.services.event_bus import (
    EventBus,
    ALL_WINDOWS_CLOSED,
    WINDOW_CLOSED,
    WINDOW_OPENED,
)

logger = logging.getLogger("voicepilot.services.windows")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


@dataclass
class TrackedWindow:
    """
    One open external resource.

    Attributes:
        id: Registry id, derived from creation time in milliseconds
        handle: Opener handle; never leaves the registry
        type: Intent type that opened it ("music", "shopping", ...)
        query: What the window is showing (search query, recipient, ...)
        platform: Destination platform ("youtube", "amazon", ...)
        opened_at: When it was tracked
        last_activity: Last successful poll or navigation
        is_active / focused / minimized: best-effort flags, may be stale
    """
    id: str
    handle: Any = field(repr=False)
    type: str
    query: Optional[str]
    platform: Optional[str]
    opened_at: datetime
    last_activity: datetime
    is_active: bool = True
    focused: bool = False
    minimized: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "query": self.query,
            "platform": self.platform,
            "opened_at": self.opened_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
            "is_active": self.is_active,
            "focused": self.focused,
            "minimized": self.minimized,
        }


class WindowRegistry:
    """
    Registry of tracked windows keyed by id.

    Usage:
        registry = WindowRegistry(opener, event_bus)
        window_id = registry.track(page, "music", "despacito", "youtube")
        registry.get_open()        # [(window_id, TrackedWindow)]
        await registry.close(window_id)
    """

    def __init__(
        self,
        opener: ResourceOpener,
        event_bus: EventBus,
        poll_interval: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.opener = opener
        self.event_bus = event_bus
        self.poll_interval = settings.WINDOW_POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
        self._clock = clock

        self._windows: Dict[str, TrackedWindow] = {}
        self._polls: Dict[str, asyncio.Task] = {}
        self._active_id: Optional[str] = None
        self._last_id = 0

    # -----------------------------------------------------------------------
    # TRACKING
    # -----------------------------------------------------------------------

    def _next_id(self) -> str:
        now_ms = int(self._clock().timestamp() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return str(self._last_id)

    def track(
        self,
        handle: Any,
        window_type: str,
        query: Optional[str],
        platform: Optional[str] = None,
    ) -> Optional[str]:
        """
        Take ownership of an opened window.

        Returns the new id, or None when there is nothing to track.
        The new entry becomes the active window.
        """
        if not handle:
            return None

        now = self._clock()
        window_id = self._next_id()
        self._windows[window_id] = TrackedWindow(
            id=window_id,
            handle=handle,
            type=window_type,
            query=query,
            platform=platform,
            opened_at=now,
            last_activity=now,
        )
        # open() brings new windows to the front
        self._mark_focused(window_id)
        self._active_id = window_id
        self._start_poll(window_id)

        logger.info(f"Tracking window {window_id} ({window_type}: {query})")
        self.event_bus.publish(WINDOW_OPENED, {
            "id": window_id,
            "type": window_type,
            "query": query,
            "platform": platform,
        })
        return window_id

    def _start_poll(self, window_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: closure is only noticed lazily by get_open/get_active
            logger.debug(f"No running loop, window {window_id} will not be polled")
            return
        self._polls[window_id] = loop.create_task(self._poll(window_id))

    async def _poll(self, window_id: str) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            window = self._windows.get(window_id)
            if window is None:
                return
            if self._is_closed(window) is True:
                self._evict(window_id, reason="closed")
                return
            window.last_activity = self._clock()
            focused = await self._has_focus(window)
            if focused is not None and window_id in self._windows:
                window.focused = focused

    # -----------------------------------------------------------------------
    # LIVENESS AND EVICTION
    # -----------------------------------------------------------------------

    def _is_closed(self, window: TrackedWindow) -> Optional[bool]:
        """True/False from the opener, or None when the handle cannot be inspected."""
        try:
            return bool(self.opener.is_closed(window.handle))
        except Exception as e:
            logger.debug(f"Cannot inspect window {window.id}, assuming open: {e}")
            return None

    async def _has_focus(self, window: TrackedWindow) -> Optional[bool]:
        try:
            return await self.opener.has_focus(window.handle)
        except Exception as e:
            logger.debug(f"Cannot read focus of window {window.id}: {e}")
            return None

    def _evict(self, window_id: str, reason: str) -> bool:
        """
        Remove an entry and announce window_closed.

        Returns False when the entry was already gone, so a window that is
        evicted by both its poll and a lazy read is announced exactly once.
        """
        window = self._windows.pop(window_id, None)
        if window is None:
            return False

        window.is_active = False
        if self._active_id == window_id:
            self._active_id = None

        poll = self._polls.pop(window_id, None)
        if poll is not None and poll is not _current_task():
            poll.cancel()

        logger.info(f"Window {window_id} removed ({reason})")
        self.event_bus.publish(WINDOW_CLOSED, {
            "id": window_id,
            "type": window.type,
            "query": window.query,
        })
        return True

    def _evict_closed(self) -> None:
        for window_id, window in list(self._windows.items()):
            if self._is_closed(window) is True:
                self._evict(window_id, reason="closed")

    # -----------------------------------------------------------------------
    # QUERIES
    # -----------------------------------------------------------------------

    def get_open(self) -> List[Tuple[str, TrackedWindow]]:
        """All tracked windows, after evicting the ones confirmed closed."""
        self._evict_closed()
        return list(self._windows.items())

    def get(self, window_id: str) -> Optional[TrackedWindow]:
        return self._windows.get(window_id)

    def get_active(self) -> Optional[TrackedWindow]:
        """The most recently tracked window if it is still open, else None."""
        if self._active_id is None:
            return None

        window = self._windows.get(self._active_id)
        if window is None:
            self._active_id = None
            return None

        if self._is_closed(window) is True:
            self._evict(window.id, reason="closed")
            return None
        return window

    def __len__(self) -> int:
        return len(self._windows)

    # -----------------------------------------------------------------------
    # COMMANDS
    # -----------------------------------------------------------------------

    async def close(self, window_id: str) -> bool:
        """
        Close one window.

        Returns True when a live window was closed, False for unknown ids
        and for windows that had already closed on their own (those are
        evicted on the way).
        """
        window = self._windows.get(window_id)
        if window is None:
            return False

        if self._is_closed(window) is True:
            self._evict(window_id, reason="closed")
            return False

        await self._close_handle(window)
        self._evict(window_id, reason="close requested")
        return True

    async def close_all(self) -> int:
        """
        Close every tracked window and empty the registry.

        Emits one window_closed per entry and then all_windows_closed.
        Returns the number of entries removed (0 on an empty registry).
        """
        count = 0
        for window_id, window in list(self._windows.items()):
            if self._is_closed(window) is not True:
                await self._close_handle(window)
            if self._evict(window_id, reason="close all"):
                count += 1

        self._active_id = None
        logger.info(f"Closed all windows ({count})")
        self.event_bus.publish(ALL_WINDOWS_CLOSED, {"count": count})
        return count

    async def _close_handle(self, window: TrackedWindow) -> None:
        try:
            await self.opener.close(window.handle)
        except Exception as e:
            # The entry is dropped anyway; a handle that refuses to close is gone for us
            logger.warning(f"Closing window {window.id} failed: {e}")

    async def navigate(self, window_id: str, url: str, query: Optional[str] = None) -> bool:
        """
        Point an existing window at a new URL.

        opened_at is kept; last_activity and query are updated.
        Returns False for unknown ids. Opener errors propagate.
        """
        window = self._windows.get(window_id)
        if window is None:
            return False

        await self.opener.navigate(window.handle, url)
        window.last_activity = self._clock()
        if query is not None:
            window.query = query
        self._active_id = window_id
        await self.focus(window_id)
        logger.info(f"Window {window_id} navigated to {url}")
        return True

    async def focus(self, window_id: str) -> bool:
        """Bring a window to the front. Best-effort, never raises."""
        window = self._windows.get(window_id)
        if window is None:
            return False
        try:
            await self.opener.focus(window.handle)
        except Exception as e:
            logger.debug(f"Focus failed for window {window_id}: {e}")
            return False
        self._mark_focused(window_id)
        return True

    def _mark_focused(self, window_id: str) -> None:
        for other_id, other in self._windows.items():
            other.focused = other_id == window_id

    async def send_media_action(self, window_id: str, action: str) -> bool:
        """Best-effort media action inside a tracked window. Never raises."""
        window = self._windows.get(window_id)
        if window is None:
            return False
        await self.focus(window_id)
        try:
            applied = await self.opener.send_media_action(window.handle, action)
        except Exception as e:
            logger.debug(f"Media action '{action}' failed for window {window_id}: {e}")
            return False
        if applied:
            window.last_activity = self._clock()
        return bool(applied)

    async def shutdown(self) -> None:
        """Stop every poll. Handles are left to the opener's own shutdown."""
        polls = list(self._polls.values())
        self._polls.clear()
        for poll in polls:
            poll.cancel()
        if polls:
            await asyncio.gather(*polls, return_exceptions=True)
