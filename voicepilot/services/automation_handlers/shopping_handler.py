"""
Shopping and Search Handlers - product searches and web searches.

Both open a results page in a new window and track it, so a later
"search X instead" can re-point the same window.
"""

from typing import List

from voicepilot.ai.intent.destinations import build_google_url, build_shopping_url
from voicepilot.ai.intent.schemas import SearchIntent, ShoppingIntent, ShoppingPlatform
from voicepilot.services.automation_handlers.base import AutomationHandler, HandlerContext
from voicepilot.services.automation_result import AutomationResult


PLATFORM_NAMES = {
    ShoppingPlatform.AMAZON: "Amazon",
    ShoppingPlatform.FLIPKART: "Flipkart",
}


class ShoppingHandler(AutomationHandler):
    """Amazon / Flipkart product search."""

    @property
    def handler_name(self) -> str:
        return "shopping"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["shopping"]

    async def handle(self, intent: ShoppingIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        platform_name = PLATFORM_NAMES[intent.platform]
        url = build_shopping_url(intent.platform, intent.query)

        handle = await self._open(
            context,
            url,
            f"{intent.platform.value}_shopping",
            f"Unable to open {platform_name} search. Please check if popups are blocked.",
        )
        window_id = context.registry.track(handle, "shopping", intent.query, intent.platform.value)

        result = AutomationResult(
            success=True,
            message=(
                f'🛒 Searching for "{intent.query}" on {platform_name}. '
                f"Enhanced search with smart filters opened in new window."
            ),
            action="shopping_opened",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "platform": intent.platform.value,
                "platform_name": platform_name,
                "query": intent.query,
                "url": url,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result, window_id)
        return result


class SearchHandler(AutomationHandler):
    """Google web search."""

    @property
    def handler_name(self) -> str:
        return "search"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["search"]

    async def handle(self, intent: SearchIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        url = build_google_url(intent.query)

        handle = await self._open(
            context,
            url,
            f"{intent.platform}_search",
            "Unable to open Google search. Please check if popups are blocked.",
        )
        window_id = context.registry.track(handle, "search", intent.query, intent.platform)

        result = AutomationResult(
            success=True,
            message=f'Searching for "{intent.query}" on Google. Results will open in a new window.',
            action="search_opened",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "platform": intent.platform,
                "query": intent.query,
                "url": url,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result, window_id)
        return result
