"""
Communication Handlers - Gmail, WhatsApp Web and phone calls.

Gmail and WhatsApp open tracked browser windows. Phone calls are handed to
the operating system through a tel: link and are not tracked; a call to a
contact name (no number) opens nothing and returns guidance instead.
"""

import logging
from typing import List

from voicepilot.ai.intent.destinations import build_gmail_url, build_phone_url, build_whatsapp_url
from voicepilot.ai.intent.schemas import GmailIntent, PhoneIntent, WhatsAppIntent
from voicepilot.services.automation_handlers.base import AutomationHandler, HandlerContext
from voicepilot.services.automation_result import AutomationResult

logger = logging.getLogger("voicepilot.services.automation_handlers.communication")


# ---------------------------------------------------------------------------
# GMAIL
# ---------------------------------------------------------------------------

def gmail_message(intent: GmailIntent) -> str:
    if intent.action != "compose":
        return "📧 Opening your Gmail inbox. All emails are now accessible in the new window."

    if not intent.recipient:
        return "📧 Opening Gmail compose window. Please specify the recipient email address."

    message = f"📧 Opening Gmail to compose an email to {intent.recipient}."
    if intent.subject:
        message += f' Subject: "{intent.subject}".'
    return message + " The compose window will open automatically!"


class GmailHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "gmail"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["gmail"]

    async def handle(self, intent: GmailIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        url = build_gmail_url(intent)

        handle = await self._open(
            context,
            url,
            "gmail_window",
            "Unable to open Gmail. Please check if popups are blocked or sign in to your Google account.",
        )
        window_id = context.registry.track(handle, "gmail", intent.recipient or "inbox", "gmail")

        result = AutomationResult(
            success=True,
            message=gmail_message(intent),
            action="gmail_opened",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "gmail_action": intent.action,
                "recipient": intent.recipient or None,
                "subject": intent.subject or None,
                "url": url,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result, window_id)
        return result


# ---------------------------------------------------------------------------
# WHATSAPP
# ---------------------------------------------------------------------------

def whatsapp_message(intent: WhatsAppIntent) -> str:
    if intent.action != "message":
        return "💬 Opening WhatsApp Web. You can now access all your chats and conversations!"

    message = f"💬 Opening WhatsApp to send message to {intent.recipient}."
    if intent.message:
        return message + f' Message: "{intent.message}"'
    return message + " Please dictate your message when WhatsApp opens."


class WhatsAppHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "whatsapp"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["whatsapp"]

    async def handle(self, intent: WhatsAppIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        url = build_whatsapp_url(intent)

        handle = await self._open(
            context,
            url,
            "whatsapp_web",
            "Unable to open WhatsApp Web. Please check if popups are blocked.",
        )
        window_id = context.registry.track(handle, "whatsapp", intent.recipient or "whatsapp_web", "whatsapp")

        result = AutomationResult(
            success=True,
            message=whatsapp_message(intent),
            action="whatsapp_message" if intent.action == "message" else "whatsapp_opened",
            window_reference=handle,
            window_id=window_id,
            metadata={
                "platform": "whatsapp_web",
                "whatsapp_action": intent.action,
                "recipient": intent.recipient,
                "message": intent.message,
                "url": url,
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result, window_id)
        return result


# ---------------------------------------------------------------------------
# PHONE
# ---------------------------------------------------------------------------

class PhoneHandler(AutomationHandler):

    @property
    def handler_name(self) -> str:
        return "phone"

    @property
    def supported_intent_types(self) -> List[str]:
        return ["phone"]

    async def handle(self, intent: PhoneIntent, context: HandlerContext) -> AutomationResult:
        self._log_entry(intent, context)
        url = build_phone_url(intent)

        if url is None:
            # Contact names cannot be dialled without a contacts lookup
            result = AutomationResult(
                success=True,
                message=f"📞 Ready to help you call {intent.contact_name}! Check the helper popup for guidance.",
                action="phone_guidance",
                metadata={
                    "call_type": "contact",
                    "contact_name": intent.contact_name,
                    "target": intent.target,
                    "timestamp": self._timestamp(),
                },
            )
            self._log_exit(context, result)
            return result

        # The user can always dial by hand, so a refused hand-off is not a failure
        handle = await context.opener.open(url, "phone_dialer")
        if not handle:
            logger.warning(f"[{context.request_id}] No dialer accepted {url}")

        result = AutomationResult(
            success=True,
            message=(
                f"📞 Attempting to call {intent.number}. "
                f"Check your device for calling options or dial manually if needed."
            ),
            action="phone_call",
            metadata={
                "call_type": "direct",
                "number": intent.number,
                "target": intent.target,
                "url": url,
                "handed_off": bool(handle),
                "timestamp": self._timestamp(),
            },
        )
        self._log_exit(context, result)
        return result
