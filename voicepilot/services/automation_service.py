"""
Automation Service - routes classified intents to automation handlers.

This is the single entry point of the dispatch path:

    intent ──► dispatch() ──► handler.handle() ──► AutomationResult
                  │
                  ├── automation_started / automation_completed events
                  └── exactly one statistics record per dispatch

Conversation intents are not automations: dispatch() returns None for them
and records nothing, so the caller can hand the text to the chat responder.

Every other dispatch records statistics and announces automation_completed
whether the handler succeeded or not. Handler failures are then re-raised
as HandlerException("Failed to execute <type> command: <cause>").
"""

import logging
import time
import uuid
from typing import List, Optional

from voicepilot.ai.intent.schemas import Intent, IntentType
from voicepilot.environments.browser.media import MediaController
from voicepilot.environments.browser.opener import ResourceOpener
from voicepilot.services.automation_handlers import (
    AutomationHandler,
    HandlerContext,
    MusicHandler,
    ShoppingHandler,
    SearchHandler,
    TravelHandler,
    GmailHandler,
    WhatsAppHandler,
    PhoneHandler,
    MediaControlHandler,
    SearchReplaceHandler,
)
from voicepilot.services.automation_result import AutomationResult
from voicepilot.services.errors import HandlerException, UnknownIntentType
from voicepilot.services.event_bus import AUTOMATION_COMPLETED, AUTOMATION_STARTED, EventBus
from voicepilot.services.monitoring import AutomationLogger, automation_logger
from voicepilot.services.statistics import StatisticsTracker
from voicepilot.services.window_registry import WindowRegistry

logger = logging.getLogger("voicepilot.services.automation")


def default_handlers() -> List[AutomationHandler]:
    return [
        MusicHandler(),
        ShoppingHandler(),
        SearchHandler(),
        TravelHandler(),
        GmailHandler(),
        WhatsAppHandler(),
        PhoneHandler(),
        MediaControlHandler(),
        SearchReplaceHandler(),
    ]


class AutomationService:
    """
    Dispatches intents to handlers and keeps the books.

    All collaborators are injected; the composition root in
    voicepilot.deps builds the process-wide instance.

    Usage:
        service = AutomationService(opener, registry, stats, bus, media)
        result = await service.dispatch(intent_classifier.classify(text))
        if result is None:
            reply = await chat_relay.send_message(text)
    """

    def __init__(
        self,
        opener: ResourceOpener,
        registry: WindowRegistry,
        statistics: StatisticsTracker,
        event_bus: EventBus,
        media_controller: MediaController,
        handlers: Optional[List[AutomationHandler]] = None,
        monitor: Optional[AutomationLogger] = None,
    ):
        self.opener = opener
        self.registry = registry
        self.statistics = statistics
        self.event_bus = event_bus
        self.media_controller = media_controller
        self.handlers = handlers if handlers is not None else default_handlers()
        self.monitor = monitor or automation_logger
        logger.info(f"Automation service initialized with {len(self.handlers)} handlers")

    def _find_handler(self, intent: Intent, context: HandlerContext) -> AutomationHandler:
        for handler in self.handlers:
            if handler.can_handle(intent, context):
                return handler
        raise UnknownIntentType(intent.intent_type.value)

    # -----------------------------------------------------------------------
    # MAIN ENTRY POINT
    # -----------------------------------------------------------------------

    async def dispatch(self, intent: Intent) -> Optional[AutomationResult]:
        """
        Execute the automation for an intent.

        Returns:
            AutomationResult, or None for conversation intents

        Raises:
            HandlerException: the handler failed (after statistics and events were recorded)
        """
        if intent.intent_type == IntentType.CONVERSATION:
            return None

        intent_type = intent.intent_type.value
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        context = HandlerContext(
            opener=self.opener,
            registry=self.registry,
            event_bus=self.event_bus,
            media_controller=self.media_controller,
            request_id=request_id,
        )

        success = False
        error: Optional[str] = None
        result: Optional[AutomationResult] = None

        self.event_bus.publish(AUTOMATION_STARTED, {
            "intent_type": intent_type,
            "original_text": intent.original_text,
        })

        try:
            handler = self._find_handler(intent, context)
            result = await handler.handle(intent, context)
            success = bool(result and result.success)

            self.event_bus.publish(AUTOMATION_COMPLETED, {
                "intent_type": intent_type,
                "success": success,
                "action": result.action if result else None,
                "window_id": result.window_id if result else None,
            })
            return result

        except Exception as e:
            success = False
            error = str(e)
            logger.error(f"[{request_id}] Automation execution error: {e}", exc_info=True)
            self.monitor.log_error(intent_type, error, error_type=type(e).__name__)

            self.event_bus.publish(AUTOMATION_COMPLETED, {
                "intent_type": intent_type,
                "success": False,
                "error": error,
            })
            raise HandlerException(intent_type, e) from e

        finally:
            query = getattr(intent, "query", None) or intent.original_text
            self.statistics.record(intent_type, success, error=error, query=query)
            self.monitor.log_dispatch(
                intent_type,
                success,
                action=result.action if result else None,
                latency_ms=(time.time() - start_time) * 1000,
                window_id=result.window_id if result else None,
            )
