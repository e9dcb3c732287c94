"""
Intent Classifier - turns a raw utterance into exactly one typed Intent.

This is the rule-based NLU component of the automation core.
It is deterministic: the same text always yields the same Intent.

The classifier:
1. Lowercases the text for keyword containment checks
2. Walks the category checks in a fixed priority order (first match wins)
3. Runs the category's extraction patterns against the original text
4. Returns a frozen Intent model (ConversationIntent when nothing matched)

Why a fixed order?
==================
Categories overlap lexically. "stop the music" contains a music keyword,
"search iphone on amazon" contains the search keyword, "send an email"
contains "send". The order below is what resolves those overlaps:

    search_replace → media_control → music → amazon → flipkart → google
    → generic shopping → phone → whatsapp → gmail → travel → conversation
"""

import logging
from typing import Optional

from voicepilot.ai.intent import patterns as p
from voicepilot.ai.intent.schemas import (
    Intent,
    MediaAction,
    MusicIntent,
    ShoppingIntent,
    ShoppingPlatform,
    SearchIntent,
    TravelIntent,
    GmailIntent,
    WhatsAppIntent,
    PhoneIntent,
    MediaControlIntent,
    SearchReplaceIntent,
    ConversationIntent,
)

logger = logging.getLogger("voicepilot.ai.intent")


# ---------------------------------------------------------------------------
# HELPER EXTRACTORS
# ---------------------------------------------------------------------------

def _group(match, index: int) -> Optional[str]:
    """Stripped capture group, or None when the group did not participate."""
    if match is None:
        return None
    value = match.group(index)
    if value is None:
        return None
    return value.strip()


def extract_music_query(text: str) -> str:
    """Strip music command words; last resort when no play pattern matched."""
    cleaned = p.MUSIC_CLEANUP_PATTERN.sub("", text).strip()
    return cleaned or p.FALLBACK_MUSIC_QUERY


def extract_shopping_query(text: str) -> str:
    cleaned = p.SHOPPING_CLEANUP_PATTERN.sub("", text).strip()
    return cleaned or p.FALLBACK_SHOPPING_QUERY


def extract_search_query(text: str) -> str:
    cleaned = p.SEARCH_CLEANUP_PATTERN.sub("", text).strip()
    return cleaned or p.FALLBACK_SEARCH_QUERY


def resolve_media_action(lower_text: str) -> MediaAction:
    """
    Map a media-control utterance to an abstract action.

    Compound phrases are checked before single words so that
    "stop the music" resolves to STOP and "next song" to NEXT.
    Falls back to PAUSE when a control phrase matched but no action did.
    """
    def has(*phrases: str) -> bool:
        return any(phrase in lower_text for phrase in phrases)

    # Compound phrases first
    if has("stop the music", "stop the song", "stop music"):
        return MediaAction.STOP
    if has("pause the music", "pause the song", "pause music"):
        return MediaAction.PAUSE
    if has("next song", "skip song"):
        return MediaAction.NEXT
    if has("previous song"):
        return MediaAction.PREVIOUS

    # Single words
    if has("pause"):
        return MediaAction.PAUSE
    if has("stop"):
        return MediaAction.STOP
    if has("resume", "continue", "play again"):
        return MediaAction.RESUME
    if has("next", "skip"):
        return MediaAction.NEXT
    if has("previous", "back"):
        return MediaAction.PREVIOUS
    if has("volume up", "louder"):
        return MediaAction.VOLUME_UP
    if has("volume down", "quieter"):
        return MediaAction.VOLUME_DOWN
    if has("mute"):
        return MediaAction.MUTE

    return MediaAction.PAUSE


class IntentClassifier:
    """
    Classifies natural language into structured intents.

    Stateless: one instance can be shared by every request.

    Usage:
        intent = intent_classifier.classify("play Shape of You by Ed Sheeran")

        if isinstance(intent, MusicIntent):
            print(f"Playing {intent.song_name} by {intent.artist_name}")
    """

    def classify(self, text: str) -> Intent:
        """
        Classify an utterance.

        Never raises for string input; anything unrecognised becomes a
        ConversationIntent carrying only the original text.
        """
        if text is None:
            text = ""
        lower_text = text.lower().strip()

        intent = self._classify(text, lower_text)
        logger.debug(f"Classified '{text[:50]}' as {intent.intent_type.value}")
        return intent

    # -----------------------------------------------------------------------
    # ORDERED CATEGORY CHECKS
    # -----------------------------------------------------------------------

    def _classify(self, text: str, lower_text: str) -> Intent:
        if "search" in lower_text and "instead" in lower_text:
            return self._search_replace(text)

        if p.contains_any(lower_text, p.MEDIA_CONTROL_PHRASES):
            return MediaControlIntent(
                original_text=text,
                action=resolve_media_action(lower_text),
            )

        if p.contains_any(lower_text, p.MUSIC_KEYWORDS):
            return self._music(text)

        if "amazon" in lower_text:
            return self._shopping(
                text,
                ShoppingPlatform.AMAZON,
                p.EXPLICIT_AMAZON_PATTERN,
                p.AMAZON_PATTERN,
            )

        if "flipkart" in lower_text:
            return self._shopping(
                text,
                ShoppingPlatform.FLIPKART,
                p.EXPLICIT_FLIPKART_PATTERN,
                p.FLIPKART_PATTERN,
            )

        # "amazon"/"flipkart" were ruled out above, so a bare "search" means Google
        if "google" in lower_text or "search" in lower_text:
            return self._search(text)

        if p.contains_any(lower_text, p.SHOPPING_KEYWORDS):
            return self._shopping(text, ShoppingPlatform.AMAZON, None, p.AMAZON_PATTERN)

        if p.contains_any(lower_text, p.PHONE_KEYWORDS):
            phone = self._phone(text)
            if phone is not None:
                return phone

        if p.contains_any(lower_text, p.WHATSAPP_KEYWORDS):
            return self._whatsapp(text)

        if p.contains_any(lower_text, p.GMAIL_KEYWORDS):
            return self._gmail(text)

        if p.contains_any(lower_text, p.TRAVEL_KEYWORDS):
            return self._travel(text, lower_text)

        return ConversationIntent(original_text=text)

    # -----------------------------------------------------------------------
    # PER-CATEGORY BUILDERS
    # -----------------------------------------------------------------------

    def _search_replace(self, text: str) -> SearchReplaceIntent:
        query = _group(p.SEARCH_REPLACE_PATTERN.search(text), 1)
        if query is None:
            query = p.FALLBACK_REPLACE_QUERY
        return SearchReplaceIntent(original_text=text, query=query)

    def _music(self, text: str) -> MusicIntent:
        artist_name: Optional[str] = None

        artist_match = p.ARTIST_SONG_PATTERN.search(text)
        if artist_match:
            song_name = _group(artist_match, 1)
            artist_name = _group(artist_match, 2) or None
        else:
            song_match = p.SONG_REQUEST_PATTERN.search(text) or p.MUSIC_PATTERN.search(text)
            if song_match:
                song_name = _group(song_match, 1)
            else:
                song_name = extract_music_query(text)

        query = f"{song_name} {artist_name}" if artist_name else song_name

        return MusicIntent(
            original_text=text,
            query=query,
            song_name=song_name,
            artist_name=artist_name,
            direct_play=True,
            auto_mute=True,
        )

    def _shopping(self, text: str, platform: ShoppingPlatform, explicit, loose) -> ShoppingIntent:
        match = explicit.search(text) if explicit is not None else None
        match = match or loose.search(text)
        query = _group(match, 1)
        if query is None:
            query = extract_shopping_query(text)
        return ShoppingIntent(original_text=text, platform=platform, query=query)

    def _search(self, text: str) -> SearchIntent:
        match = p.EXPLICIT_GOOGLE_PATTERN.search(text) or p.GOOGLE_PATTERN.search(text)
        query = _group(match, 1)
        if query is None:
            query = extract_search_query(text)
        return SearchIntent(original_text=text, query=query)

    def _phone(self, text: str) -> Optional[PhoneIntent]:
        """Phone intent, or None when no call target could be extracted."""
        target = _group(p.PHONE_PATTERN.search(text), 1)
        if target is None:
            return None

        chunks = p.NUMBER_CHUNK_PATTERN.findall(target)
        digits = p.NON_DIGIT_PATTERN.sub("", "".join(chunks))
        is_number = len(digits) >= p.MIN_PHONE_DIGITS

        return PhoneIntent(
            original_text=text,
            target=target,
            is_number=is_number,
            number=digits if is_number else None,
            contact_name=None if is_number else target,
        )

    def _whatsapp(self, text: str) -> WhatsAppIntent:
        match = p.WHATSAPP_MESSAGE_PATTERN.search(text)
        if match:
            return WhatsAppIntent(
                original_text=text,
                action="message",
                recipient=_group(match, 1),
                message=_group(match, 2) or "",
            )
        # Explicit "open whatsapp" and a bare keyword both mean open
        return WhatsAppIntent(original_text=text, action="open")

    def _gmail(self, text: str) -> GmailIntent:
        match = p.COMPOSE_PATTERN.search(text)
        if match:
            recipient_text = _group(match, 1)
            email_match = p.EMAIL_ADDRESS_PATTERN.search(recipient_text)
            recipient = email_match.group(1) if email_match else recipient_text
            return GmailIntent(
                original_text=text,
                action="compose",
                recipient=recipient,
                subject=_group(match, 2) or "",
            )
        return GmailIntent(original_text=text, action="open")

    def _travel(self, text: str, lower_text: str) -> TravelIntent:
        match = p.FLIGHT_PATTERN.search(text)
        from_city = (_group(match, 1) or _group(match, 4)) or None
        to_city = (_group(match, 2) or _group(match, 3)) or None
        return TravelIntent(
            original_text=text,
            flight_type="indigo" if "indigo" in lower_text else "general",
            from_city=from_city,
            to_city=to_city,
            time=_group(match, 5) or None,
        )


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
intent_classifier = IntentClassifier()
