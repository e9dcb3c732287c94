"""
Music Handler - plays a song in a YouTube window.

Direct play first looks the track up in the direct-video table; a hit opens
the watch page with autoplay, a miss opens the search page and lets the
opener click the first result. Non-direct requests open a plain search on
the intent's platform.
"""

from typing import List

from voicepilot.ai.intent.destinations import (
    VideoSearchDescriptor,
    build_music_url,
    destination_url,
    resolve_direct_video,
)
from voicepilot.ai.intent.schemas import MusicIntent
from voicepilot.services.automation_handlers.base import AutomationHandler, HandlerContext
from voicepilot.services.automation_result import AutomationResult
from voicepilot.services.event_bus import MUSIC_STARTED


AUTO_MUTE_SUFFIX = " 🎤 Microphone automatically muted during playback."


def song_display(intent: MusicIntent) -> str:
    if intent.artist_name:
        return f'"{intent.song_name}" by {intent.artist_name}'
    return f'"{intent.query}"'


class MusicHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "music"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["music"]

    async def handle(self, intent: MusicIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        platform = intent.platform.value

        if intent.direct_play:
            destination = await resolve_direct_video(intent.query)
        else:
            destination = build_music_url(intent.query, False, intent.platform)

        url = destination_url(destination)
        is_direct_video = isinstance(destination, str) and "watch?v=" in destination
        auto_click = isinstance(destination, VideoSearchDescriptor) and destination.needs_auto_click

        handle = await self._open(
            context,
            destination,
            "youtube_player",
            "Unable to open YouTube player. Please check if popups are blocked.",
        )
        window_id = context.registry.track(handle, "music", intent.query, platform)

        context.event_bus.publish(MUSIC_STARTED, {
            "window_id": window_id,
            "query": intent.query,
            "song_name": intent.song_name,
            "artist_name": intent.artist_name,
            "auto_mute": intent.auto_mute,
        })

        display = song_display(intent)
        if is_direct_video:
            message = f"🎵 Playing {display} directly on YouTube! Music starting automatically with enhanced playback."
        elif auto_click:
            message = f"🎶 Smart search for {display} on YouTube. Auto-clicking first result with AI selection!"
        else:
            message = f"🎧 Found {display} on YouTube. Click the first result for instant playback."
        if intent.auto_mute:
            message += AUTO_MUTE_SUFFIX

        result = AutomationResult(
            success=True,
            message=message,
            action="music_playing",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "search_type": "direct" if is_direct_video else "search",
                "auto_click": auto_click,
                "url": url,
                "query": intent.query,
                "song_name": intent.song_name,
                "artist_name": intent.artist_name,
                "platform": platform,
                "auto_mute": intent.auto_mute,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result, window_id)
        return result
