"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Fake opener and window handles (no real browser)
- Event recorder subscribed to a fresh event bus
- Fresh window registry, statistics tracker and automation service
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio

from voicepilot.ai.intent.destinations import Destination, destination_url
from voicepilot.environments.browser.media import RecordingMediaController
from voicepilot.environments.browser.opener import ResourceOpener
from voicepilot.services.automation_service import AutomationService
from voicepilot.services.event_bus import EventBus
from voicepilot.services.kv_store import InMemoryKeyValueStore
from voicepilot.services.statistics import StatisticsTracker
from voicepilot.services.window_registry import WindowRegistry

TODAY = date(2026, 10, 19)


# ---------------------------------------------------------------------------
# FAKE BROWSER
# ---------------------------------------------------------------------------

class FakeHandle:
    """Stands in for a browser page. Set .closed to simulate the user closing it."""

    def __init__(self, logical_name: str, url: str):
        self.logical_name = logical_name
        self.url = url
        self.closed = False
        self.focused = False
        self.media_actions: List[str] = []

    def __repr__(self) -> str:
        return f"<FakeHandle {self.logical_name} {self.url}>"


class FakeOpener(ResourceOpener):
    """
    Records every call. Set .blocked to make open() fail like a popup blocker,
    and .inspect_error to make is_closed() raise.
    """

    def __init__(self):
        self.opened: List[Tuple[Destination, str]] = []
        self.handles: List[FakeHandle] = []
        self.closed_handles: List[FakeHandle] = []
        self.navigations: List[Tuple[FakeHandle, str]] = []
        self.blocked = False
        self.inspect_error: Optional[Exception] = None

    async def open(self, destination: Destination, logical_name: str) -> Optional[FakeHandle]:
        self.opened.append((destination, logical_name))
        if self.blocked:
            return None
        handle = FakeHandle(logical_name, destination_url(destination))
        self.handles.append(handle)
        return handle

    def is_closed(self, handle: FakeHandle) -> bool:
        if self.inspect_error is not None:
            raise self.inspect_error
        return handle.closed

    async def close(self, handle: FakeHandle) -> None:
        handle.closed = True
        self.closed_handles.append(handle)

    async def focus(self, handle: FakeHandle) -> None:
        handle.focused = True

    async def navigate(self, handle: FakeHandle, url: str) -> None:
        handle.url = url
        self.navigations.append((handle, url))

    async def send_media_action(self, handle: FakeHandle, action: str) -> bool:
        handle.media_actions.append(action)
        return True

    async def has_focus(self, handle: FakeHandle) -> Optional[bool]:
        if self.inspect_error is not None:
            raise self.inspect_error
        return handle.focused

    @property
    def last_url(self) -> Optional[str]:
        if not self.opened:
            return None
        return destination_url(self.opened[-1][0])


class EventRecorder:
    """Event bus subscriber that keeps (name, payload) pairs."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, name: str, payload: Dict[str, Any]) -> None:
        self.events.append((name, payload))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def of(self, name: str) -> List[Dict[str, Any]]:
        return [payload for event, payload in self.events if event == name]


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(bus: EventBus) -> EventRecorder:
    recorder = EventRecorder()
    bus.subscribe(recorder)
    return recorder


@pytest_asyncio.fixture
async def registry(opener: FakeOpener, bus: EventBus):
    """
    Registry with a poll interval long enough that polls never fire
    during a test; closure is noticed through the lazy reads instead.
    """
    registry = WindowRegistry(opener, bus, poll_interval=3600)
    yield registry
    await registry.shutdown()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def tracker(store: InMemoryKeyValueStore) -> StatisticsTracker:
    return StatisticsTracker(store, today=lambda: TODAY)


@pytest.fixture
def media_controller() -> RecordingMediaController:
    return RecordingMediaController()


@pytest.fixture
def service(opener, registry, tracker, bus, media_controller) -> AutomationService:
    return AutomationService(
        opener=opener,
        registry=registry,
        statistics=tracker,
        event_bus=bus,
        media_controller=media_controller,
    )


@pytest.fixture
def make_handle():
    """Factory for handles that can be tracked without going through the opener."""
    def make(logical_name: str = "youtube_player", url: str = "https://example.com") -> FakeHandle:
        return FakeHandle(logical_name, url)
    return make
