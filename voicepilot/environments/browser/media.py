"""
In-page Media Controller - applies playback actions to the caller's own surface.

Media started inside the assistant UI (not in a tracked window) can only be
reached by the UI itself, so the default controller pushes a media-control
frame to every connected UI client and lets the page act on its own
<audio>/<video> elements. There is no delivery guarantee.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from voicepilot.ai.intent.schemas import MediaAction
from voicepilot.services.websocket_manager import ConnectionManager, connection_manager

logger = logging.getLogger("voicepilot.environments.browser")


class MediaController(ABC):
    """Best-effort sink for abstract media actions. apply() must not raise."""

    @abstractmethod
    async def apply(self, action: MediaAction) -> None:
        pass


class WebSocketMediaController(MediaController):
    """Broadcasts {"type": "media_control", "action": ...} to UI clients."""

    def __init__(self, manager: Optional[ConnectionManager] = None):
        self.manager = manager or connection_manager

    async def apply(self, action: MediaAction) -> None:
        results = await self.manager.send_media_control(action.value)
        delivered = sum(1 for ok in results.values() if ok)
        logger.debug(f"Media action '{action.value}' delivered to {delivered}/{len(results)} UI clients")


class RecordingMediaController(MediaController):
    """Keeps every action it receives. Used when no UI is attached (CLI, tests)."""

    def __init__(self):
        self.actions: List[MediaAction] = []

    async def apply(self, action: MediaAction) -> None:
        self.actions.append(action)
