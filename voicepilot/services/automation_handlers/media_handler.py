"""
Media Handlers - control what is playing, or re-point the last search.

MediaControlHandler never opens anything. It sends the action to the
active tracked window (if it is still open) and to the caller's own
media controller, and always reports success: neither path can tell
us whether anything actually paused.

SearchReplaceHandler navigates the most recent live music, shopping or
search window to the new query. With no such window it opens a new
YouTube search instead.
"""

import logging
from typing import List, Optional

from voicepilot.ai.intent.destinations import (
    build_google_url,
    build_shopping_url,
    destination_url,
    resolve_direct_video,
)
from voicepilot.ai.intent.schemas import (
    MediaControlIntent,
    SearchReplaceIntent,
    ShoppingPlatform,
)
from voicepilot.services.automation_handlers.base import AutomationHandler, HandlerContext
from voicepilot.services.automation_handlers.shopping_handler import PLATFORM_NAMES
from voicepilot.services.automation_result import AutomationResult
from voicepilot.services.window_registry import TrackedWindow

logger = logging.getLogger("voicepilot.services.automation_handlers.media")

ACTION_MESSAGES = {
    "pause": "Pausing current media playback.",
    "stop": "Stopping current media playback.",
    "resume": "Resuming media playback.",
    "next": "Skipping to next track/video.",
    "previous": "Going to previous track/video.",
    "volume_up": "Increasing volume.",
    "volume_down": "Decreasing volume.",
    "mute": "Toggling audio mute.",
}

REPLACEABLE_TYPES = ("music", "shopping", "search")


# ---------------------------------------------------------------------------
# MEDIA CONTROL
# ---------------------------------------------------------------------------

class MediaControlHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "media_control"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["media_control"]

    async def handle(self, intent: MediaControlIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        action = intent.action.value

        active = context.registry.get_active()
        window_applied = False
        if active is not None:
            window_applied = await context.registry.send_media_action(active.id, action)

        try:
            await context.media_controller.apply(intent.action)
        except Exception as e:
            logger.debug(f"[{context.request_id}] In-page media control failed: {e}")

        message = ACTION_MESSAGES.get(action, "Media control executed.")
        if active is not None and active.query:
            message += f' (controlling {active.type}: "{active.query}")'

        result = AutomationResult(
            success=True,
            message=message,
            action="media_controlled",
            window_id=active.id if active is not None else None,
            metadata={
                "control_action": action,
                "window_applied": window_applied,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result)
        return result


# ---------------------------------------------------------------------------
# SEARCH REPLACE
# ---------------------------------------------------------------------------

def _replaceable_window(context: HandlerContext) -> Optional[TrackedWindow]:
    """The active window if replaceable, else the newest live replaceable one."""
    active = context.registry.get_active()
    if active is not None and active.type in REPLACEABLE_TYPES:
        return active
    for _, window in reversed(context.registry.get_open()):
        if window.type in REPLACEABLE_TYPES:
            return window
    return None


class SearchReplaceHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "search_replace"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["search_replace"]

    async def handle(self, intent: SearchReplaceIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        query = intent.query

        window = _replaceable_window(context)
        if window is not None:
            result = await self._replace_in_place(window, query, context)
        else:
            result = await self._open_new_search(query, context)

        self._log_exit(context, result, result.window_id)
        return result

    async def _replace_in_place(
        self,
        window: TrackedWindow,
        query: str,
        context: HandlerContext,
    ) -> AutomationResult:
        if window.type == "music":
            url = destination_url(await resolve_direct_video(query))
            message = f'Searching for "{query}" instead. Updating the current YouTube window.'
        elif window.type == "shopping":
            platform = ShoppingPlatform(window.platform) if window.platform in ("amazon", "flipkart") else ShoppingPlatform.AMAZON
            url = build_shopping_url(platform, query)
            message = (
                f'Searching for "{query}" instead on {PLATFORM_NAMES[platform]}. '
                f"Updating the current shopping window."
            )
        else:
            url = build_google_url(query)
            message = f'Searching for "{query}" instead on Google. Updating the current search window.'

        await context.registry.navigate(window.id, url, query)

        return AutomationResult(
            success=True,
            message=message,
            action="search_replaced",
            window_reference=window.handle,
            window_id=window.id,
            metadata={
                "window_type": window.type,
                "query": query,
                "url": url,
                "timestamp": self._timestamp(),
            },
        )

    async def _open_new_search(self, query: str, context: HandlerContext) -> AutomationResult:
        destination = await resolve_direct_video(query)
        handle = await self._open(
            context,
            destination,
            "youtube_player",
            "Unable to open new search. Please check if popups are blocked.",
        )
        window_id = context.registry.track(handle, "music", query, "youtube")

        return AutomationResult(
            success=True,
            message=f'Searching for "{query}" on YouTube in a new window.',
            action="new_search_opened",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "query": query,
                "url": destination_url(destination),
                "timestamp": self._timestamp(),
            },
        )
