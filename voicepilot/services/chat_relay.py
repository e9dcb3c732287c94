"""
Chat Relay Client - forwards conversational turns to the chat backend.

When dispatch returns None the utterance is not an automation, so the
HTTP layer hands it here. The backend answers POST {base}/chat with
{"message": "..."}; this client only moves text back and forth.

No retries: a failed call surfaces as ChatRelayError with a message
that can be shown to the user as-is.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from voicepilot.core.config import settings

logger = logging.getLogger("voicepilot.services.chat_relay")

# Turns of history sent along with each message
HISTORY_WINDOW = 10


class ChatRelayError(Exception):
    """Raised when the chat backend cannot produce a reply."""
    pass


def format_history(history: Optional[List[Dict[str, Any]]]) -> List[Dict[str, str]]:
    """
    Normalize transcript entries to {"role", "content"}.

    Accepts either {"role", "content"} or transcript-style {"sender", "text"}
    entries and keeps only the last HISTORY_WINDOW of them.
    """
    formatted = []
    for turn in (history or [])[-HISTORY_WINDOW:]:
        if "role" in turn:
            role = "user" if turn["role"] == "user" else "assistant"
            content = turn.get("content", "")
        else:
            role = "user" if turn.get("sender") == "user" else "assistant"
            content = turn.get("text", "")
        formatted.append({"role": role, "content": content})
    return formatted


class ChatRelayClient:
    """
    Async client for the conversational responder.

    Usage:
        reply = await chat_relay.send_message("hello, how are you", history)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.CHAT_RELAY_URL).rstrip("/")
        self.timeout = timeout or settings.CHAT_RELAY_TIMEOUT
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def send_message(
        self,
        message: str,
        history: Optional[List[Dict[str, Any]]] = None,
    ) -> str:
        """Send one user message and return the assistant's reply text."""
        if not message or not isinstance(message, str):
            raise ChatRelayError("Message is required and must be a string")

        payload = {
            "message": message.strip(),
            "conversationHistory": format_history(history),
        }

        logger.info(f"Relaying message to chat backend: {message[:50]}")

        async with self._client() as client:
            try:
                response = await client.post("/chat", json=payload)
            except httpx.RequestError as e:
                logger.error(f"Network error talking to chat backend: {e}")
                raise ChatRelayError(
                    "Unable to connect to the server. Please check your internet connection."
                ) from e

        if response.status_code != 200:
            try:
                error_msg = response.json().get("error") or "Server error occurred"
            except ValueError:
                error_msg = "Server error occurred"
            logger.error(f"Chat backend returned {response.status_code}: {error_msg}")
            raise ChatRelayError(error_msg)

        try:
            reply = response.json().get("message")
        except ValueError as e:
            raise ChatRelayError("Chat backend returned an unreadable response") from e

        if not reply:
            raise ChatRelayError("Chat backend returned an empty reply")
        return reply

    async def check_health(self) -> bool:
        """True when GET {base}/health answers 200."""
        async with self._client() as client:
            try:
                response = await client.get("/health")
            except httpx.RequestError as e:
                logger.warning(f"Chat backend health check failed: {e}")
                return False
        return response.status_code == 200
