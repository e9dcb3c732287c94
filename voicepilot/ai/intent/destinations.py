"""
Destination URL Builders - pure functions from Intent fields to target URLs.

One builder per destination family:
- Music:     YouTube (direct video or search descriptor), YouTube Music, Spotify, SoundCloud
- Shopping:  Amazon, Flipkart
- Search:    Google
- Travel:    MakeMyTrip
- Mail:      Gmail inbox / compose
- Messaging: WhatsApp Web
- Phone:     tel: links

Everything here is synchronous and side-effect free, except
resolve_direct_video() which is async so a real lookup can replace
the static table without changing callers.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode

from voicepilot.core.config import settings
from voicepilot.ai.intent.schemas import (
    GmailIntent,
    MusicPlatform,
    PhoneIntent,
    ShoppingPlatform,
    TravelIntent,
    WhatsAppIntent,
)

logger = logging.getLogger("voicepilot.ai.intent")


# ---------------------------------------------------------------------------
# BASE URLS
# ---------------------------------------------------------------------------
YOUTUBE_SEARCH_URL = "https://www.youtube.com/results?search_query={q}&sp=EgIQAQ%253D%253D"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}&autoplay=1&mute=0&start=0&enablejsapi=1"
YOUTUBE_MUSIC_SEARCH_URL = "https://music.youtube.com/search?q={q}"
SPOTIFY_SEARCH_URL = "https://open.spotify.com/search/{q}"
SOUNDCLOUD_SEARCH_URL = "https://soundcloud.com/search?q={q}"

AMAZON_SEARCH_URL = "https://www.amazon.com/s?k={q}&ref=nb_sb_noss"
FLIPKART_SEARCH_URL = "https://www.flipkart.com/search?q={q}&sort=relevance"
GOOGLE_SEARCH_URL = "https://www.google.com/search?q={q}&sourceid=chrome&ie=UTF-8"

MAKEMYTRIP_SEARCH_URL = "https://www.makemytrip.com/flight/search"
MAKEMYTRIP_LISTING_URL = "https://www.makemytrip.com/flights/"

GMAIL_BASE_URL = "https://mail.google.com/mail/u/0/"
GMAIL_INBOX_URL = GMAIL_BASE_URL + "#inbox"
GMAIL_COMPOSE_URL = GMAIL_BASE_URL + "#compose"

WHATSAPP_WEB_URL = "https://web.whatsapp.com/"


# ---------------------------------------------------------------------------
# DIRECT VIDEO TABLE
# ---------------------------------------------------------------------------
# Normalized track phrase → YouTube video id.
# Matching is substring containment in both directions (see _lookup_video_id).
POPULAR_SONGS: Dict[str, str] = {
    "despacito": "kJQP7kiw5Fk",
    "shape of you": "JGwWNGJdvx8",
    "perfect": "tgPXVfcF3sY",
    "blinding lights": "4NRXx6U8ABQ",
    "watermelon sugar": "H7bqZIpC3Pg",
    "levitating": "TUVcZfQe-Kw",
    "drivers license": "ZmDBbnmKpqQ",
    "stay": "qjVBag8nPy0",
    "good 4 u": "gNi_6U5Pm_o",
    "supreme": "AX1zRInC_TA",
    "that girl": "oGORM1_ziSY",
    "fell for you": "SiKfBBoF51w",
    "aath asle": "0FnZO-U5oHo",
    "together": "7iy8iB8tu5c",
    "heat waves": "mRD0-GxqHVo",
    "as it was": "H5v3kku4y6Q",
    "bad habit": "orJSJGHjBLI",
    "anti hero": "b1kbLWvqugk",
    "flowers": "G7KNmW9a75Y",
    "unholy": "Uq9gPaIzbe8",
    "sunflower": "ApXoWvfEYVU",
    "somebody that i used to know": "8UVNT4wvIGY",
    "rolling in the deep": "rYEDA3JcQqw",
    "bohemian rhapsody": "fJ9rUzIMcZQ",
    "imagine": "YkgkThdzX-8",
    "hotel california": "09839DpTctU",
    "sweet child o mine": "1w7OgIMMRc4",
    "smells like teen spirit": "hTWKbfoikeg",
    "billie jean": "Zi_XLOBDo_Y",
    "thriller": "sOnqjkJTMaA",
    "dancing queen": "xFrGuyw1V8s",
    "dont stop believin": "1k8craCGpgs",
    "sweet caroline": "1vhFnTjia_I",
    "wonderwall": "bx1Bh8ZvH84",
    "hey jude": "A_MjCqQoLLA",
    "let it be": "QDYfEBY9NM4",
}


@dataclass(frozen=True)
class VideoSearchDescriptor:
    """
    Returned instead of a URL when no direct video is known.

    Tells the opener to load the search page and then try to click
    the first result (needs_auto_click) as soon as the page is ready.
    """
    url: str
    query: str
    encoded_query: str
    needs_auto_click: bool = True
    needs_aggressive_autoplay: bool = True


Destination = Union[str, VideoSearchDescriptor]


def encode_component(value: str) -> str:
    """Percent-encode a single URL component (same safe set as encodeURIComponent)."""
    return quote(value, safe="-_.!~*'()")


def destination_url(destination: Destination) -> str:
    """The URL to load for either form of destination."""
    if isinstance(destination, VideoSearchDescriptor):
        return destination.url
    return destination


# ---------------------------------------------------------------------------
# MUSIC
# ---------------------------------------------------------------------------

def build_music_url(
    query: str,
    direct_play: bool = False,
    platform: MusicPlatform = MusicPlatform.YOUTUBE,
) -> str:
    """Search URL on the chosen music platform."""
    q = encode_component(query)
    if platform == MusicPlatform.SPOTIFY:
        return SPOTIFY_SEARCH_URL.format(q=q)
    if platform == MusicPlatform.SOUNDCLOUD:
        return SOUNDCLOUD_SEARCH_URL.format(q=q)
    if platform == MusicPlatform.YOUTUBE_MUSIC:
        return YOUTUBE_MUSIC_SEARCH_URL.format(q=q)
    if direct_play:
        return YOUTUBE_SEARCH_URL.format(q=q)
    return YOUTUBE_MUSIC_SEARCH_URL.format(q=q)


def _lookup_video_id(query: str) -> Optional[str]:
    query_lower = query.lower().strip()
    for song_key, video_id in POPULAR_SONGS.items():
        if song_key in query_lower or query_lower in song_key:
            return video_id
    return None


async def resolve_direct_video(query: str) -> Destination:
    """
    Direct watch URL for a known track, else a search descriptor.

    A table hit yields a watch URL with autoplay parameters; a miss yields
    a VideoSearchDescriptor so the opener can click the first result.
    """
    video_id = _lookup_video_id(query)
    if video_id is not None:
        logger.info(f"Direct video match for '{query}' -> {video_id}")
        return YOUTUBE_WATCH_URL.format(video_id=video_id)

    encoded = encode_component(query)
    return VideoSearchDescriptor(
        url=YOUTUBE_SEARCH_URL.format(q=encoded),
        query=query,
        encoded_query=encoded,
    )


# ---------------------------------------------------------------------------
# SHOPPING / SEARCH
# ---------------------------------------------------------------------------

def build_amazon_url(query: str) -> str:
    return AMAZON_SEARCH_URL.format(q=encode_component(query))


def build_flipkart_url(query: str) -> str:
    return FLIPKART_SEARCH_URL.format(q=encode_component(query))


def build_shopping_url(platform: ShoppingPlatform, query: str) -> str:
    if platform == ShoppingPlatform.FLIPKART:
        return build_flipkart_url(query)
    return build_amazon_url(query)


def build_google_url(query: str) -> str:
    return GOOGLE_SEARCH_URL.format(q=encode_component(query))


# ---------------------------------------------------------------------------
# TRAVEL
# ---------------------------------------------------------------------------

def build_makemytrip_url(intent: TravelIntent) -> str:
    """
    Flight search URL with only the parameters the intent actually carries.

    from/to come from the utterance, airline=indigo when Indigo was named.
    No parameters at all means the plain flights listing page.
    """
    params = []
    if intent.from_city:
        params.append(("from", intent.from_city))
    if intent.to_city:
        params.append(("to", intent.to_city))
    if intent.flight_type == "indigo":
        params.append(("airline", "indigo"))

    if not params:
        return MAKEMYTRIP_LISTING_URL

    query = "&".join(f"{key}={encode_component(value)}" for key, value in params)
    return f"{MAKEMYTRIP_SEARCH_URL}?{query}"


# ---------------------------------------------------------------------------
# MAIL / MESSAGING / PHONE
# ---------------------------------------------------------------------------

def build_gmail_url(intent: GmailIntent, body: Optional[str] = None) -> str:
    if intent.action != "compose":
        return GMAIL_INBOX_URL

    if not intent.recipient:
        return GMAIL_COMPOSE_URL

    params = [("to", intent.recipient)]
    if intent.subject:
        params.append(("subject", intent.subject))
    params.append(("body", body if body is not None else settings.GMAIL_DEFAULT_BODY))
    return f"{GMAIL_BASE_URL}?{urlencode(params)}#compose"


def build_whatsapp_url(intent: Optional[WhatsAppIntent] = None) -> str:
    # Messages are typed by the user once WhatsApp Web is open
    return WHATSAPP_WEB_URL


def build_phone_url(intent: PhoneIntent) -> Optional[str]:
    """tel: link for numeric targets, None for contact names."""
    if intent.is_number and intent.number:
        return f"tel:{intent.number}"
    return None
