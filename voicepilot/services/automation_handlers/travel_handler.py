"""
Travel Handler - flight searches on MakeMyTrip.
"""

from typing import List

from voicepilot.ai.intent.destinations import build_makemytrip_url
from voicepilot.ai.intent.schemas import TravelIntent
from voicepilot.services.automation_handlers.base import AutomationHandler, HandlerContext
from voicepilot.services.automation_result import AutomationResult


def travel_message(intent: TravelIntent) -> str:
    if intent.flight_type == "indigo":
        message = "Searching for Indigo flights on MakeMyTrip."
    elif intent.from_city and intent.to_city:
        message = f"Searching for flights from {intent.from_city} to {intent.to_city} on MakeMyTrip."
    elif intent.to_city:
        message = f"Searching for flights to {intent.to_city} on MakeMyTrip."
    else:
        message = "Opening MakeMyTrip for flight search."

    if intent.time:
        message += f" Looking for flights around {intent.time}."

    return message + " The search will open in a new window while our conversation continues here."


class TravelHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "travel"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["travel"]

    async def handle(self, intent: TravelIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        url = build_makemytrip_url(intent)

        handle = await self._open(
            context,
            url,
            "makemytrip_flights",
            "Unable to open MakeMyTrip. Please check if popups are blocked.",
        )
        route = " to ".join(city for city in (intent.from_city, intent.to_city) if city) or "flights"
        window_id = context.registry.track(handle, "travel", route, intent.platform)

        result = AutomationResult(
            success=True,
            message=travel_message(intent),
            action="travel_opened",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "platform": intent.platform,
                "flight_type": intent.flight_type,
                "from": intent.from_city,
                "to": intent.to_city,
                "time": intent.time,
                "url": url,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result, window_id)
        return result
