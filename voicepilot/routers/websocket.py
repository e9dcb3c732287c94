"""
WebSocket router - real-time connections with UI and voice observers.

Observers connect here to watch automation events as they happen and to
receive media-control frames aimed at their own page.

Frames:
- Server → Client: {"type": "connected", "client_id": ...} once, then
  {"type": "event", ...} and {"type": "media_control", ...} frames
- Client → Server: {"type": "heartbeat"} (answered with heartbeat_ack)
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from voicepilot.deps import AutomationContainer, get_container

logger = logging.getLogger("voicepilot.routers.websocket")

# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/ws", tags=["websocket"])


# ---------------------------------------------------------------------------
# WEBSOCKET ENDPOINT
# ---------------------------------------------------------------------------

@router.websocket("/ui")
async def ui_websocket(
    websocket: WebSocket,
    client_id: Optional[str] = Query(None, description="Stable id of the observer; generated when omitted"),
    container: AutomationContainer = Depends(get_container),
):
    """
    WebSocket endpoint for UI observers.

    Connection URL: ws://host:port/ws/ui?client_id=<id>

    The socket joins the container's ConnectionManager, the same one the
    event bus forwards to.
    """
    connections = container.connections
    client_id = client_id or str(uuid.uuid4())
    await connections.connect(client_id, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "client_id": client_id,
            "message": "Listening for automation events",
        })

        while True:
            try:
                data = await websocket.receive_json()
            except json.JSONDecodeError:
                logger.warning(f"Client {client_id}: Received invalid JSON")
                await websocket.send_json({"type": "error", "message": "Invalid JSON format"})
                continue

            message_type = data.get("type", "unknown") if isinstance(data, dict) else "unknown"
            if message_type == "heartbeat":
                await websocket.send_json({
                    "type": "heartbeat_ack",
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                })
            else:
                logger.warning(f"Client {client_id}: Unknown message type: {message_type}")

    except WebSocketDisconnect:
        logger.info(f"Client {client_id}: WebSocket disconnected")

    finally:
        connections.disconnect(client_id)
