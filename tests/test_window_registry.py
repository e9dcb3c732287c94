"""
Tests for the window registry.

These tests verify:
- Tracking and the active designation
- Lazy eviction of windows the user closed, announced exactly once
- Explicit close and close_all
- Navigation for search replacement
"""

import asyncio

import pytest

from voicepilot.services.event_bus import ALL_WINDOWS_CLOSED, WINDOW_CLOSED, WINDOW_OPENED
from voicepilot.services.window_registry import WindowRegistry


class TestTracking:
    """Tests for track()."""

    @pytest.mark.asyncio
    async def test_track_returns_id_and_announces(self, registry, recorder, make_handle):
        window_id = registry.track(make_handle(), "music", "despacito", "youtube")

        assert window_id is not None
        assert recorder.of(WINDOW_OPENED) == [
            {"id": window_id, "type": "music", "query": "despacito", "platform": "youtube"}
        ]

    @pytest.mark.asyncio
    async def test_nothing_to_track(self, registry, recorder):
        assert registry.track(None, "music", "despacito") is None
        assert len(registry) == 0
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, registry, make_handle):
        ids = {registry.track(make_handle(), "search", f"q{i}") for i in range(20)}

        assert len(ids) == 20

    @pytest.mark.asyncio
    async def test_newest_window_is_active(self, registry, make_handle):
        registry.track(make_handle(), "music", "first")
        second = registry.track(make_handle(), "search", "second")

        assert registry.get_active().id == second


class TestEviction:
    """Windows the user closed are dropped on read."""

    @pytest.mark.asyncio
    async def test_get_open_evicts_closed(self, registry, recorder, make_handle):
        handle = make_handle()
        closed_id = registry.track(handle, "music", "despacito")
        open_id = registry.track(make_handle(), "search", "weather")

        handle.closed = True

        assert [window_id for window_id, _ in registry.get_open()] == [open_id]
        assert recorder.of(WINDOW_CLOSED) == [{"id": closed_id, "type": "music", "query": "despacito"}]

    @pytest.mark.asyncio
    async def test_window_closed_announced_once(self, registry, recorder, make_handle):
        handle = make_handle()
        registry.track(handle, "music", "despacito")
        handle.closed = True

        registry.get_open()
        registry.get_open()
        registry.get_active()

        assert len(recorder.of(WINDOW_CLOSED)) == 1

    @pytest.mark.asyncio
    async def test_active_cleared_when_closed(self, registry, make_handle):
        handle = make_handle()
        registry.track(handle, "music", "despacito")
        handle.closed = True

        assert registry.get_active() is None

    @pytest.mark.asyncio
    async def test_uninspectable_handle_is_kept(self, registry, opener, make_handle):
        registry.track(make_handle(), "music", "despacito")
        opener.inspect_error = RuntimeError("target crashed")

        assert len(registry.get_open()) == 1

    @pytest.mark.asyncio
    async def test_poll_notices_closure(self, opener, bus, recorder, make_handle):
        registry = WindowRegistry(opener, bus, poll_interval=0.01)
        handle = make_handle()
        window_id = registry.track(handle, "music", "despacito")

        handle.closed = True
        for _ in range(50):
            if registry.get(window_id) is None:
                break
            await asyncio.sleep(0.01)

        assert registry.get(window_id) is None
        assert len(recorder.of(WINDOW_CLOSED)) == 1
        await registry.shutdown()

    @pytest.mark.asyncio
    async def test_poll_refreshes_focus(self, opener, bus, make_handle):
        registry = WindowRegistry(opener, bus, poll_interval=0.01)
        handle = make_handle()
        window_id = registry.track(handle, "music", "despacito")
        assert registry.get(window_id).focused is True

        handle.focused = False
        for _ in range(50):
            if registry.get(window_id).focused is False:
                break
            await asyncio.sleep(0.01)
        assert registry.get(window_id).focused is False

        handle.focused = True
        for _ in range(50):
            if registry.get(window_id).focused is True:
                break
            await asyncio.sleep(0.01)
        assert registry.get(window_id).focused is True
        await registry.shutdown()

    @pytest.mark.asyncio
    async def test_unreadable_focus_keeps_last_value(self, opener, bus, make_handle):
        registry = WindowRegistry(opener, bus, poll_interval=0.01)
        opener.inspect_error = RuntimeError("cross-origin")
        window_id = registry.track(make_handle(), "music", "despacito")

        await asyncio.sleep(0.05)

        window = registry.get(window_id)
        assert window is not None
        assert window.focused is True
        await registry.shutdown()


class TestClose:
    """Tests for close() and close_all()."""

    @pytest.mark.asyncio
    async def test_close_live_window(self, registry, opener, recorder, make_handle):
        handle = make_handle()
        window_id = registry.track(handle, "music", "despacito")

        assert await registry.close(window_id) is True
        assert handle in opener.closed_handles
        assert registry.get(window_id) is None
        assert len(recorder.of(WINDOW_CLOSED)) == 1

    @pytest.mark.asyncio
    async def test_close_unknown_id(self, registry):
        assert await registry.close("does-not-exist") is False

    @pytest.mark.asyncio
    async def test_close_twice(self, registry, make_handle):
        window_id = registry.track(make_handle(), "music", "despacito")

        assert await registry.close(window_id) is True
        assert await registry.close(window_id) is False

    @pytest.mark.asyncio
    async def test_close_already_closed_window(self, registry, opener, make_handle):
        handle = make_handle()
        window_id = registry.track(handle, "music", "despacito")
        handle.closed = True

        assert await registry.close(window_id) is False
        assert registry.get(window_id) is None
        assert opener.closed_handles == []

    @pytest.mark.asyncio
    async def test_close_all(self, registry, recorder, make_handle):
        registry.track(make_handle(), "music", "one")
        registry.track(make_handle(), "search", "two")

        assert await registry.close_all() == 2
        assert len(registry) == 0
        assert registry.get_active() is None
        assert len(recorder.of(WINDOW_CLOSED)) == 2
        assert recorder.of(ALL_WINDOWS_CLOSED) == [{"count": 2}]

    @pytest.mark.asyncio
    async def test_close_all_is_idempotent(self, registry, make_handle):
        registry.track(make_handle(), "music", "one")

        await registry.close_all()

        assert await registry.close_all() == 0


class TestNavigate:
    """Tests for navigate()."""

    @pytest.mark.asyncio
    async def test_navigate_keeps_opened_at(self, registry, opener, make_handle):
        handle = make_handle()
        window_id = registry.track(handle, "search", "weather")
        opened_at = registry.get(window_id).opened_at

        assert await registry.navigate(window_id, "https://example.com/new", "news") is True

        window = registry.get(window_id)
        assert window.opened_at == opened_at
        assert window.query == "news"
        assert handle.url == "https://example.com/new"

    @pytest.mark.asyncio
    async def test_navigate_unknown_id(self, registry):
        assert await registry.navigate("nope", "https://example.com") is False

    @pytest.mark.asyncio
    async def test_send_media_action(self, registry, make_handle):
        handle = make_handle()
        window_id = registry.track(handle, "music", "despacito")

        assert await registry.send_media_action(window_id, "pause") is True
        assert handle.media_actions == ["pause"]


class TestFocus:
    """Tests for the focused flag."""

    @pytest.mark.asyncio
    async def test_newest_window_has_focus(self, registry, make_handle):
        first = registry.track(make_handle(), "music", "one")
        second = registry.track(make_handle(), "search", "two")

        assert registry.get(first).focused is False
        assert registry.get(second).focused is True

    @pytest.mark.asyncio
    async def test_navigate_brings_window_forward(self, registry, make_handle):
        handle = make_handle()
        first = registry.track(handle, "shopping", "iPhone")
        registry.track(make_handle(), "search", "weather")

        await registry.navigate(first, "https://example.com/samsung", "Samsung")

        assert handle.focused is True
        assert registry.get(first).focused is True
        assert [w.focused for _, w in registry.get_open()].count(True) == 1

    @pytest.mark.asyncio
    async def test_media_action_focuses_target(self, registry, make_handle):
        handle = make_handle()
        first = registry.track(handle, "music", "despacito")
        registry.track(make_handle(), "search", "weather")

        await registry.send_media_action(first, "pause")

        assert handle.focused is True
        assert registry.get(first).focused is True

    @pytest.mark.asyncio
    async def test_focus_unknown_id(self, registry):
        assert await registry.focus("nope") is False
