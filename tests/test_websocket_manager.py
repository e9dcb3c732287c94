"""
Tests for the WebSocket connection manager.

These tests verify:
- Connection registration and removal
- Event and media-control frames
- Event bus forwarding
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from voicepilot.ai.intent.schemas import MediaAction
from voicepilot.environments.browser.media import WebSocketMediaController
from voicepilot.services.event_bus import EventBus, WINDOW_OPENED
from voicepilot.services.websocket_manager import ConnectionManager


class TestConnectionRegistration:
    """Tests for WebSocket connection registration."""

    @pytest.mark.asyncio
    async def test_connect_accepts_and_registers(self):
        manager = ConnectionManager()
        websocket = AsyncMock()

        await manager.connect("ui-1", websocket)

        websocket.accept.assert_called_once()
        assert manager.is_connected("ui-1")

    @pytest.mark.asyncio
    async def test_connect_replaces_existing_connection(self):
        """Should close the old socket when the same client reconnects."""
        manager = ConnectionManager()
        old_websocket = AsyncMock()
        new_websocket = AsyncMock()

        await manager.connect("ui-1", old_websocket)
        await manager.connect("ui-1", new_websocket)

        old_websocket.close.assert_called_once()
        assert manager.get_connection_count() == 1

    @pytest.mark.asyncio
    async def test_disconnect(self):
        manager = ConnectionManager()
        await manager.connect("ui-1", AsyncMock())

        manager.disconnect("ui-1")
        manager.disconnect("ui-1")

        assert not manager.is_connected("ui-1")


class TestFrames:
    """Tests for outgoing frames."""

    @pytest.mark.asyncio
    async def test_send_event_broadcasts(self):
        manager = ConnectionManager()
        first, second = AsyncMock(), AsyncMock()
        await manager.connect("ui-1", first)
        await manager.connect("ui-2", second)

        results = await manager.send_event(WINDOW_OPENED, {"id": "1"})

        assert results == {"ui-1": True, "ui-2": True}
        frame = first.send_json.call_args[0][0]
        assert frame["type"] == "event"
        assert frame["event"] == WINDOW_OPENED
        assert frame["data"] == {"id": "1"}

    @pytest.mark.asyncio
    async def test_failed_client_is_dropped(self):
        manager = ConnectionManager()
        websocket = AsyncMock()
        websocket.send_json.side_effect = RuntimeError("socket closed")
        await manager.connect("ui-1", websocket)

        assert await manager.send_to_client("ui-1", {"type": "event"}) is False
        assert not manager.is_connected("ui-1")

    @pytest.mark.asyncio
    async def test_media_controller_sends_media_control_frame(self):
        manager = ConnectionManager()
        websocket = AsyncMock()
        await manager.connect("ui-1", websocket)

        await WebSocketMediaController(manager).apply(MediaAction.PAUSE)

        frame = websocket.send_json.call_args[0][0]
        assert frame["type"] == "media_control"
        assert frame["action"] == "pause"


class TestEventForwarding:

    @pytest.mark.asyncio
    async def test_bus_events_reach_clients(self):
        manager = ConnectionManager()
        websocket = AsyncMock()
        await manager.connect("ui-1", websocket)
        bus = EventBus()
        bus.subscribe(manager.event_forwarder())

        bus.publish(WINDOW_OPENED, {"id": "1"})
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        frame = websocket.send_json.call_args[0][0]
        assert frame["event"] == WINDOW_OPENED

    def test_no_loop_is_a_no_op(self):
        manager = ConnectionManager()
        manager._connections["ui-1"] = AsyncMock()

        manager.event_forwarder()(WINDOW_OPENED, {"id": "1"})
