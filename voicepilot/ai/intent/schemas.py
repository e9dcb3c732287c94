"""
Intent Schemas - Pydantic models for structured intents.

These schemas define the structure of classified utterances.
Using Pydantic ensures type safety and validation.

Design Philosophy:
=================
- Frozen models: an Intent never changes after classification
- One model per intent type, each carrying only its relevant fields
- A discriminated union (AnyIntent) keyed by intent_type, so an intent
  serialized to JSON comes back as the right class
- Self-documenting with type hints
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class IntentType(str, Enum):
    """
    Closed set of intent categories produced by the classifier.

    MUSIC: Play a song or artist (YouTube by default)
    SHOPPING: Search a shopping site (Amazon or Flipkart)
    SEARCH: Web search (Google)
    TRAVEL: Flight search (MakeMyTrip)
    GMAIL: Open the inbox or compose an email
    WHATSAPP: Open WhatsApp Web or prepare a message
    PHONE: Call a number or a contact
    MEDIA_CONTROL: Control whatever media is already playing
    SEARCH_REPLACE: Replace the query of the last opened window
    CONVERSATION: Nothing to automate, hand to the chat responder
    """
    MUSIC = "music"
    SHOPPING = "shopping"
    SEARCH = "search"
    TRAVEL = "travel"
    GMAIL = "gmail"
    WHATSAPP = "whatsapp"
    PHONE = "phone"
    MEDIA_CONTROL = "media_control"
    SEARCH_REPLACE = "search_replace"
    CONVERSATION = "conversation"


class MediaAction(str, Enum):
    """Abstract playback actions understood by media controllers."""
    PAUSE = "pause"
    STOP = "stop"
    RESUME = "resume"
    NEXT = "next"
    PREVIOUS = "previous"
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    MUTE = "mute"


class ShoppingPlatform(str, Enum):
    AMAZON = "amazon"
    FLIPKART = "flipkart"


class MusicPlatform(str, Enum):
    YOUTUBE = "youtube"
    YOUTUBE_MUSIC = "youtube_music"
    SPOTIFY = "spotify"
    SOUNDCLOUD = "soundcloud"


class Intent(BaseModel):
    """
    Base intent class - common fields for all intents.

    original_text is always kept, even for conversation intents,
    so the caller can relay the exact utterance elsewhere.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    intent_type: IntentType
    original_text: str = Field(description="The raw user utterance")

    @property
    def type(self) -> IntentType:
        return self.intent_type


class MusicIntent(Intent):
    """
    Intent for music playback.

    Examples:
    - "play Despacito song" → song_name="Despacito", query="Despacito"
    - "play Shape of You by Ed Sheeran" → song_name="Shape of You",
      artist_name="Ed Sheeran", query="Shape of You Ed Sheeran"
    """
    intent_type: Literal[IntentType.MUSIC] = IntentType.MUSIC
    action: Literal["play"] = "play"
    query: str = Field(description="Search query sent to the music platform")
    song_name: str = Field(description="Extracted song name")
    artist_name: Optional[str] = Field(default=None, description="Extracted artist, if any")
    platform: MusicPlatform = Field(default=MusicPlatform.YOUTUBE)
    direct_play: bool = Field(default=True, description="Attempt direct video playback")
    auto_mute: bool = Field(default=True, description="Mute the microphone during playback")


class ShoppingIntent(Intent):
    """
    Intent for shopping searches.

    Examples:
    - "search iPhone on amazon" → platform=amazon, query="iPhone"
    - "buy headphones" → platform=amazon (default), query="headphones"
    """
    intent_type: Literal[IntentType.SHOPPING] = IntentType.SHOPPING
    platform: ShoppingPlatform = Field(default=ShoppingPlatform.AMAZON)
    query: str


class SearchIntent(Intent):
    """Intent for a web search. Only Google is supported."""
    intent_type: Literal[IntentType.SEARCH] = IntentType.SEARCH
    platform: Literal["google"] = "google"
    query: str


class TravelIntent(Intent):
    """
    Intent for flight searches.

    Examples:
    - "book flights from Delhi to Mumbai" → from_city="Delhi", to_city="Mumbai"
    - "show indigo flights" → flight_type="indigo"
    """
    intent_type: Literal[IntentType.TRAVEL] = IntentType.TRAVEL
    platform: Literal["makemytrip"] = "makemytrip"
    flight_type: Literal["indigo", "general"] = "general"
    from_city: Optional[str] = None
    to_city: Optional[str] = None
    time: Optional[str] = Field(default=None, description="Time or time window, e.g. '6 pm'")


class GmailIntent(Intent):
    """
    Intent for Gmail.

    action="compose" carries a recipient (bare address when one was spoken)
    and an optional subject; action="open" opens the inbox.
    """
    intent_type: Literal[IntentType.GMAIL] = IntentType.GMAIL
    action: Literal["open", "compose"] = "open"
    recipient: Optional[str] = None
    subject: Optional[str] = None


class WhatsAppIntent(Intent):
    """Intent for WhatsApp Web: open it, or prepare a message to someone."""
    intent_type: Literal[IntentType.WHATSAPP] = IntentType.WHATSAPP
    action: Literal["open", "message"] = "open"
    recipient: Optional[str] = None
    message: Optional[str] = None


class PhoneIntent(Intent):
    """
    Intent for phone calls.

    A target with at least 7 digits is a number (is_number=True, number holds
    the digits only); anything else is treated as a contact name.
    """
    intent_type: Literal[IntentType.PHONE] = IntentType.PHONE
    action: Literal["call"] = "call"
    target: str
    is_number: bool = False
    number: Optional[str] = None
    contact_name: Optional[str] = None


class MediaControlIntent(Intent):
    """Intent for controlling media that is already playing."""
    intent_type: Literal[IntentType.MEDIA_CONTROL] = IntentType.MEDIA_CONTROL
    action: MediaAction = MediaAction.PAUSE


class SearchReplaceIntent(Intent):
    """Intent for "search X instead": re-point the last window at a new query."""
    intent_type: Literal[IntentType.SEARCH_REPLACE] = IntentType.SEARCH_REPLACE
    query: str


class ConversationIntent(Intent):
    """Fallback intent: carries no automation fields."""
    intent_type: Literal[IntentType.CONVERSATION] = IntentType.CONVERSATION


AnyIntent = Annotated[
    Union[
        MusicIntent,
        ShoppingIntent,
        SearchIntent,
        TravelIntent,
        GmailIntent,
        WhatsAppIntent,
        PhoneIntent,
        MediaControlIntent,
        SearchReplaceIntent,
        ConversationIntent,
    ],
    Field(discriminator="intent_type"),
]


class IntentEnvelope(BaseModel):
    """Wrapper used to validate an intent from raw JSON (API bodies, fixtures)."""
    intent: AnyIntent
