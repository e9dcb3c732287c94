"""
Base Automation Handler - Abstract interface for all automation handlers.

This module defines the contract that all automation handlers must follow.

Design Pattern: Strategy Pattern
================================
The base class defines the interface, and each handler implements it.
AutomationService routes an Intent to the first handler whose
can_handle() accepts it, without knowing what the handler does.

Example:
    handler = MusicHandler()
    if handler.can_handle(intent, context):
        result = await handler.handle(intent, context)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional

from voicepilot.ai.intent.destinations import Destination
from voicepilot.ai.intent.schemas import Intent
from voicepilot.environments.browser.media import MediaController
from voicepilot.environments.browser.opener import ResourceOpener
from voicepilot.services.automation_result import AutomationResult
from voicepilot.services.errors import AutomationOpenFailure
from voicepilot.services.event_bus import EventBus
from voicepilot.services.window_registry import WindowRegistry

logger = logging.getLogger("voicepilot.services.automation_handlers")

POPUP_REMEDY = "Please check if popups are blocked."


@dataclass
class HandlerContext:
    """
    Collaborators shared by every handler for one dispatch.

    Attributes:
        opener: Opens destinations, returns handles (None on failure)
        registry: Owns every handle once tracked
        event_bus: Lifecycle announcements
        media_controller: Best-effort control of the caller's own media
        request_id: Identifier used in log lines
    """
    opener: ResourceOpener
    registry: WindowRegistry
    event_bus: EventBus
    media_controller: MediaController
    request_id: str = ""


class AutomationHandler(ABC):
    """
    Abstract base class for automation handlers.

    Responsibilities:
    - Build the destination for an intent
    - Open it through the opener and hand the handle to the registry
    - Return an AutomationResult with a human-readable message

    NOT Responsible For:
    - Classifying text (IntentClassifier's job)
    - Statistics and lifecycle events around the dispatch (AutomationService's job)

    Unlike the result-only style used elsewhere, handlers RAISE on failure
    (AutomationOpenFailure when the opener returns None). The service
    records the failure and wraps the exception for the caller.
    """

    @property
    @abstractmethod
    def handler_name(self) -> str:
        pass

    @property
    @abstractmethod
    def supported_intent_types(self) -> List[str]:
        """IntentType values this handler can process."""
        pass

    def can_handle(self, intent: Intent, context: HandlerContext) -> bool:
        return intent.intent_type.value in self.supported_intent_types

    @abstractmethod
    async def handle(self, intent: Intent, context: HandlerContext) -> AutomationResult:
        pass

    # -----------------------------------------------------------------------
    # SHARED HELPERS
    # -----------------------------------------------------------------------

    async def _open(
        self,
        context: HandlerContext,
        destination: Destination,
        logical_name: str,
        failure_message: str,
    ) -> Any:
        """Open a destination or raise AutomationOpenFailure with the given message."""
        handle = await context.opener.open(destination, logical_name)
        if not handle:
            logger.warning(f"[{context.request_id}] {self.handler_name}: opener returned nothing for {logical_name}")
            raise AutomationOpenFailure(logical_name, POPUP_REMEDY, message=failure_message)
        return handle

    @staticmethod
    def _timestamp() -> str:
        return datetime.now(timezone.utc).isoformat()

    def _log_entry(self, intent: Intent, context: HandlerContext) -> None:
        logger.info(
            f"[{context.request_id}] {self.handler_name}.handle() called",
            extra={"handler": self.handler_name, "intent_type": intent.intent_type.value},
        )

    def _log_exit(self, context: HandlerContext, result: AutomationResult, window_id: Optional[str] = None) -> None:
        logger.info(
            f"[{context.request_id}] {self.handler_name}.handle() completed: {result.action}",
            extra={"handler": self.handler_name, "success": result.success, "window_id": window_id},
        )
