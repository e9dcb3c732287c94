"""
WebSocket Connection Manager - real-time connections with UI/voice observers.

This service manages WebSocket connections for observer clients
(the chat UI, the voice layer):
- Maintains a map of client_id -> WebSocket connection
- Handles connect/disconnect lifecycle
- Forwards Event Bus events to every connected client
- Delivers media-control frames to the client's own page

Frames sent to clients:
    {"type": "event", "event": "window_opened", "data": {...}, "timestamp": "..."}
    {"type": "media_control", "action": "pause", "timestamp": "..."}

In-memory storage; one server process owns every connection.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from fastapi import WebSocket

logger = logging.getLogger("voicepilot.services.websocket")


class ConnectionManager:
    """
    Manages WebSocket connections for observer clients.

    Each client_id has at most ONE active connection. Reconnecting with
    the same id closes the previous socket first.
    """

    def __init__(self):
        self._connections: dict[str, WebSocket] = {}
        self._pending: set = set()

    async def connect(self, client_id: str, websocket: WebSocket) -> None:
        if client_id in self._connections:
            old_ws = self._connections[client_id]
            try:
                await old_ws.close(code=1000, reason="New connection established")
            except RuntimeError as e:
                # Already closed by the client
                logger.debug(f"Client {client_id}: old connection already closed: {e}")
            logger.info(f"Client {client_id}: Closed old connection")

        await websocket.accept()
        self._connections[client_id] = websocket
        logger.info(f"Client {client_id}: Connected. Total connections: {len(self._connections)}")

    def disconnect(self, client_id: str) -> None:
        if client_id in self._connections:
            del self._connections[client_id]
            logger.info(f"Client {client_id}: Disconnected. Total connections: {len(self._connections)}")

    def is_connected(self, client_id: str) -> bool:
        return client_id in self._connections

    async def send_to_client(self, client_id: str, message: dict[str, Any]) -> bool:
        """
        Send a JSON message to one client.

        Returns:
            True if sent, False if the client is not connected or the send failed
            (a failed client is disconnected).
        """
        websocket = self._connections.get(client_id)
        if websocket is None:
            return False

        try:
            await websocket.send_json(message)
            logger.debug(f"Client {client_id}: Sent {message.get('type', 'unknown')}")
            return True
        except Exception as e:
            logger.error(f"Client {client_id}: Failed to send message: {e}")
            self.disconnect(client_id)
            return False

    async def broadcast(self, message: dict[str, Any]) -> Dict[str, bool]:
        """Send a message to every connected client; returns client_id -> delivered."""
        results = {}
        for client_id in list(self._connections.keys()):
            results[client_id] = await self.send_to_client(client_id, message)
        return results

    async def send_event(self, event: str, data: dict[str, Any]) -> Dict[str, bool]:
        return await self.broadcast({
            "type": "event",
            "event": event,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def send_media_control(self, action: str) -> Dict[str, bool]:
        return await self.broadcast({
            "type": "media_control",
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def event_forwarder(self) -> Callable[[str, Dict[str, Any]], None]:
        """
        Event Bus subscriber that forwards every event to connected clients.

        The bus calls subscribers synchronously, so delivery is scheduled
        on the running loop. Outside a loop (or with no clients) it is a no-op.
        """
        def forward(event: str, data: Dict[str, Any]) -> None:
            if not self._connections:
                return
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug(f"No running loop, dropping '{event}' for UI clients")
                return
            task = loop.create_task(self.send_event(event, data))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return forward

    def get_connected_client_ids(self) -> list[str]:
        return list(self._connections.keys())

    def get_connection_count(self) -> int:
        return len(self._connections)


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
# Usage: from voicepilot.services.websocket_manager import connection_manager
connection_manager = ConnectionManager()
