"""
Dependencies module - composition root and FastAPI dependencies.

Every stateful service (event bus, window registry, statistics tracker,
automation service) is built exactly once here and passed to whoever
needs it. Routes receive the container through get_container(); tests
replace it with app.dependency_overrides.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status

from voicepilot.ai.intent.classifier import IntentClassifier, intent_classifier
from voicepilot.environments.browser.media import MediaController, WebSocketMediaController
from voicepilot.environments.browser.opener import PlaywrightOpener, ResourceOpener
from voicepilot.services.automation_service import AutomationService
from voicepilot.services.chat_relay import ChatRelayClient
from voicepilot.services.event_bus import EventBus
from voicepilot.services.kv_store import KeyValueStore, SqlKeyValueStore
from voicepilot.services.statistics import StatisticsTracker
from voicepilot.services.websocket_manager import ConnectionManager, connection_manager
from voicepilot.services.window_registry import WindowRegistry

logger = logging.getLogger("voicepilot.deps")


@dataclass
class AutomationContainer:
    """Everything one running assistant needs, wired together."""
    classifier: IntentClassifier
    event_bus: EventBus
    opener: ResourceOpener
    registry: WindowRegistry
    statistics: StatisticsTracker
    media_controller: MediaController
    service: AutomationService
    chat_relay: ChatRelayClient
    connections: ConnectionManager

    async def shutdown(self) -> None:
        await self.registry.shutdown()
        await self.opener.shutdown()


def build_container(
    opener: Optional[ResourceOpener] = None,
    store: Optional[KeyValueStore] = None,
    media_controller: Optional[MediaController] = None,
    chat_relay: Optional[ChatRelayClient] = None,
    connections: Optional[ConnectionManager] = None,
    poll_interval: Optional[float] = None,
) -> AutomationContainer:
    """
    Build the object graph. Defaults are the production collaborators;
    pass fakes to build a test instance.

    Loads persisted statistics before returning.
    """
    connections = connections or connection_manager
    event_bus = EventBus()
    event_bus.subscribe(connections.event_forwarder())

    opener = opener or PlaywrightOpener()
    registry = WindowRegistry(opener, event_bus, poll_interval=poll_interval)
    statistics = StatisticsTracker(store or SqlKeyValueStore())
    statistics.load()
    media_controller = media_controller or WebSocketMediaController(connections)

    service = AutomationService(
        opener=opener,
        registry=registry,
        statistics=statistics,
        event_bus=event_bus,
        media_controller=media_controller,
    )

    return AutomationContainer(
        classifier=intent_classifier,
        event_bus=event_bus,
        opener=opener,
        registry=registry,
        statistics=statistics,
        media_controller=media_controller,
        service=service,
        chat_relay=chat_relay or ChatRelayClient(),
        connections=connections,
    )


# ---------------------------------------------------------------------------
# PROCESS-WIDE CONTAINER
# ---------------------------------------------------------------------------
# Set by the application lifespan (voicepilot.main); None until startup.
_container: Optional[AutomationContainer] = None


def set_container(container: Optional[AutomationContainer]) -> None:
    global _container
    _container = container


def get_container() -> AutomationContainer:
    """FastAPI dependency returning the running container."""
    if _container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Automation core is not started",
        )
    return _container
