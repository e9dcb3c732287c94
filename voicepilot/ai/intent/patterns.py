"""
Pattern Library - keyword sets and extraction patterns per intent category.

Pure data: compiled regular expressions and keyword tuples, no state.
All patterns are case-insensitive and are applied with .search() to the
original (un-lowercased) utterance, so extracted values keep the user's casing.
Keyword sets are matched as plain substrings of the lowercased utterance.

Extraction patterns use minimal quantifiers (.*?) so trailing command
words ("song", "on amazon") are not swallowed into the captured value.
"""

import re
from typing import Pattern, Tuple

_I = re.IGNORECASE


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, _I)


# ---------------------------------------------------------------------------
# MUSIC
# ---------------------------------------------------------------------------
MUSIC_KEYWORDS: Tuple[str, ...] = (
    "play", "music", "song", "album", "artist", "spotify", "youtube music", "yt",
)

MUSIC_PATTERN = _compile(
    r"(?:play|listen to|put on)\s+(.*?)"
    r"(?:\s+(?:song|music|track|album|by|on youtube|on yt))?$"
)

SONG_REQUEST_PATTERN = _compile(
    r"(?:play|listen to|put on|start|begin)\s+(?:the\s+song\s+|a\s+song\s+)?(.+?)"
    r"(?:\s+(?:song|music|track|album|by|on youtube|on yt|please))?$"
)

# "X by Y": group 1 is the song, group 2 the artist
ARTIST_SONG_PATTERN = _compile(
    r"(?:play|listen to|put on)\s+(.+?)\s+by\s+(.+?)"
    r"(?:\s+(?:song|music|track|album|on youtube|on yt))?$"
)

MUSIC_CLEANUP_PATTERN = _compile(
    r"(?:play|listen to|put on|music|song|track|album|by|on youtube|on yt)\s*"
)

# ---------------------------------------------------------------------------
# SHOPPING
# ---------------------------------------------------------------------------
SHOPPING_KEYWORDS: Tuple[str, ...] = (
    "buy", "search", "amazon", "flipkart", "shop", "purchase", "order", "find",
)

AMAZON_PATTERN = _compile(
    r"(?:search|buy|find|look for|shop for)\s+(.*?)(?:\s+(?:on|in)\s+amazon)?$"
)
EXPLICIT_AMAZON_PATTERN = _compile(
    r"(?:search|find|look for|buy)\s+(.*?)\s+(?:on|in)\s+amazon"
)

FLIPKART_PATTERN = _compile(
    r"(?:search|buy|find|look for|shop for)\s+(.*?)(?:\s+(?:on|in)\s+flipkart)?$"
)
EXPLICIT_FLIPKART_PATTERN = _compile(
    r"(?:search|find|look for|buy)\s+(.*?)\s+(?:on|in)\s+flipkart"
)

SHOPPING_CLEANUP_PATTERN = _compile(
    r"(?:search|buy|find|look for|shop for|on amazon|in amazon|on flipkart|in flipkart)\s*"
)

# ---------------------------------------------------------------------------
# WEB SEARCH
# ---------------------------------------------------------------------------
GOOGLE_PATTERN = _compile(
    r"(?:search|google|find|look for)\s+(.*?)(?:\s+(?:on|in)\s+google)?$"
)
EXPLICIT_GOOGLE_PATTERN = _compile(
    r"(?:search|find|look for|google)\s+(.*?)\s+(?:on|in)\s+google"
)

SEARCH_CLEANUP_PATTERN = _compile(
    r"(?:search|google|find|look for|on google|in google)\s*"
)

# ---------------------------------------------------------------------------
# TRAVEL
# ---------------------------------------------------------------------------
TRAVEL_KEYWORDS: Tuple[str, ...] = (
    "flight", "flights", "book", "travel", "makemytrip", "indigo", "air india", "spicejet",
)

# Groups: 1=from (with to), 2=to (with from), 3=to only, 4=from only, 5=time
# Anchored at the end so the lazy city groups run up to the time or end of text
FLIGHT_PATTERN = _compile(
    r"(?:show|find|book|search)\s+(?:flights?|indigo flights?)\s*"
    r"(?:from\s+(.*?)\s+to\s+(.*?)|to\s+(.*?)|from\s+(.*?))?"
    r"(?:\s+(?:at|from|around)\s+(\d{1,2}(?::\d{2})?\s*(?:am|pm)|\d{1,2}\s*-\s*\d{1,2}\s*(?:am|pm)))?"
    r"\s*$"
)

# ---------------------------------------------------------------------------
# GMAIL
# ---------------------------------------------------------------------------
GMAIL_KEYWORDS: Tuple[str, ...] = (
    "gmail", "email", "mail", "compose", "send", "write",
)

GMAIL_OPEN_PATTERN = _compile(r"(?:open|go to|check)\s+(?:my\s+)?gmail")

# Groups: 1=recipient phrase, 2=subject
COMPOSE_PATTERN = _compile(
    r"(?:write|compose|send)\s+(?:a\s+|an\s+)?(?:email|mail)\s+to\s+(.*?)"
    r"(?:\s+(?:about|regarding|with subject)\s+(.*?))?$"
)

EMAIL_ADDRESS_PATTERN = _compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")

# ---------------------------------------------------------------------------
# WHATSAPP
# ---------------------------------------------------------------------------
WHATSAPP_KEYWORDS: Tuple[str, ...] = (
    "whatsapp", "whats app", "what's app", "message", "text", "chat",
)

WHATSAPP_OPEN_PATTERN = _compile(
    r"(?:open|go to|launch|start)\s+(?:whatsapp|whats app|what's app)"
)

# Groups: 1=recipient, 2=message body
WHATSAPP_MESSAGE_PATTERN = _compile(
    r"(?:write|send|text|message)\s+(?:a\s+)?(?:message|text|chat)\s+to\s+(.*?)"
    r"(?:\s+saying\s+(.*?))?$"
)

# ---------------------------------------------------------------------------
# PHONE
# ---------------------------------------------------------------------------
PHONE_KEYWORDS: Tuple[str, ...] = ("call", "dial", "phone")

PHONE_PATTERN = _compile(r"(?:call|dial|phone)\s+(?:to\s+)?(.+)")

NUMBER_CHUNK_PATTERN = re.compile(r"[\d\s\-\(\)\+]+")
NON_DIGIT_PATTERN = re.compile(r"\D")

# A target with at least this many digits is dialled as a number
MIN_PHONE_DIGITS = 7

# ---------------------------------------------------------------------------
# MEDIA CONTROL
# ---------------------------------------------------------------------------
MEDIA_CONTROL_PHRASES: Tuple[str, ...] = (
    "pause", "stop", "resume", "play again", "continue", "next", "previous", "skip",
    "volume up", "volume down", "mute", "louder", "quieter",
    "pause music", "stop music", "stop the music", "pause the song", "stop the song",
    "next song", "previous song", "skip song",
)

# ---------------------------------------------------------------------------
# SEARCH REPLACE
# ---------------------------------------------------------------------------
SEARCH_REPLACE_PATTERN = _compile(r"search\s+(.*?)\s+instead")

# Literal fallbacks when an extractor leaves nothing behind
FALLBACK_MUSIC_QUERY = "music"
FALLBACK_SHOPPING_QUERY = "products"
FALLBACK_SEARCH_QUERY = "search"
FALLBACK_REPLACE_QUERY = "new search"


def contains_any(lower_text: str, keywords: Tuple[str, ...]) -> bool:
    """Substring containment, not word-boundary matching ("email" contains "mail")."""
    return any(keyword in lower_text for keyword in keywords)
