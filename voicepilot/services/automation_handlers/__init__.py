"""
Automation Handlers Package - Strategy pattern for automation execution.

One handler per automation family. Each knows how to turn its Intent
into a destination, open it, track the window and describe what happened.

Usage:
    from voicepilot.services.automation_handlers import AutomationHandler, HandlerContext

    class MyHandler(AutomationHandler):
        @property
        def handler_name(self) -> str:
            return "my_handler"

        @property
        def supported_intent_types(self) -> List[str]:
            return ["my_intent_type"]

        async def handle(self, intent, context) -> AutomationResult:
            ...

Design Pattern: Strategy Pattern
================================
AutomationHandler defines the contract; AutomationService is the context
that picks the handler and wraps execution in statistics and events.
"""

from voicepilot.services.automation_handlers.base import (
    AutomationHandler,
    HandlerContext,
)
from voicepilot.services.automation_handlers.music_handler import MusicHandler
from voicepilot.services.automation_handlers.shopping_handler import ShoppingHandler, SearchHandler
from voicepilot.services.automation_handlers.travel_handler import TravelHandler
from voicepilot.services.automation_handlers.communication_handler import (
    GmailHandler,
    WhatsAppHandler,
    PhoneHandler,
)
from voicepilot.services.automation_handlers.media_handler import (
    MediaControlHandler,
    SearchReplaceHandler,
)

__all__ = [
    "AutomationHandler",
    "HandlerContext",
    "MusicHandler",
    "ShoppingHandler",
    "SearchHandler",
    "TravelHandler",
    "GmailHandler",
    "WhatsAppHandler",
    "PhoneHandler",
    "MediaControlHandler",
    "SearchReplaceHandler",
]
