"""
Response generation - short spoken/printed acknowledgements for automations.

Wraps AutomationResult.message in one of four templates per intent type,
chosen at random so repeated commands don't sound identical.
"""

import random
from typing import Dict, List, Optional

from voicepilot.ai.intent.schemas import Intent
from voicepilot.services.automation_result import AutomationResult

RESPONSE_TEMPLATES: Dict[str, List[str]] = {
    "music": ["🎵 {m}", "Great choice! {m}", "🎶 {m}", "🎧 {m}"],
    "shopping": ["🛒 {m}", "Perfect! {m}", "🔍 {m}", "🛍️ {m}"],
    "search": ["🔍 {m}", "Found it! {m}", "🌐 {m}", "📝 {m}"],
    "travel": ["✈️ {m}", "Excellent! {m}", "🧳 {m}", "🌍 {m}"],
    "media_control": ["🎛️ {m}", "Done! {m}", "✅ {m}", "🎮 {m}"],
    "search_replace": ["🔄 {m}", "Updated! {m}", "🆕 {m}", "✨ {m}"],
    "gmail": ["📧 {m}", "Perfect! {m}", "✅ {m}", "📬 {m}"],
    "whatsapp": ["💬 {m}", "Great! {m}", "✅ {m}", "📱 {m}"],
    "phone": ["📞 {m}", "Calling! {m}", "✅ {m}", "📱 {m}"],
}

DEFAULT_TEMPLATE = "✅ {m}"


def generate_automation_response(
    intent: Intent,
    result: Optional[AutomationResult],
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """
    Acknowledgement text for a successful automation.

    Returns None when there is no result or it did not succeed, so the
    caller falls back to its own wording.
    """
    if result is None or not result.success:
        return None

    templates = RESPONSE_TEMPLATES.get(intent.intent_type.value)
    if not templates:
        return DEFAULT_TEMPLATE.format(m=result.message)

    chooser = rng or random
    return chooser.choice(templates).format(m=result.message)
