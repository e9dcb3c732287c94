"""
Intent Module - Natural Language Understanding for the automation core.

This module turns what users say into something the dispatcher can execute.

Example Flow:
============
User says: "play Shape of You by Ed Sheeran"

IntentClassifier extracts:
{
    "intent_type": "music",
    "song_name": "Shape of You",
    "artist_name": "Ed Sheeran",
    "query": "Shape of You Ed Sheeran",
    "direct_play": true,
    "auto_mute": true
}

resolve_direct_video resolves:
"Shape of You Ed Sheeran" → https://www.youtube.com/watch?v=JGwWNGJdvx8&autoplay=1...
"""

from voicepilot.ai.intent.schemas import (
    Intent,
    IntentType,
    AnyIntent,
    MediaAction,
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
)
from voicepilot.ai.intent.classifier import IntentClassifier, intent_classifier
from voicepilot.ai.intent.destinations import VideoSearchDescriptor, resolve_direct_video

__all__ = [
    "Intent",
    "IntentType",
    "AnyIntent",
    "MediaAction",
    "MusicIntent",
    "ShoppingIntent",
    "SearchIntent",
    "TravelIntent",
    "GmailIntent",
    "WhatsAppIntent",
    "PhoneIntent",
    "MediaControlIntent",
    "SearchReplaceIntent",
    "ConversationIntent",
    "IntentClassifier",
    "intent_classifier",
    "VideoSearchDescriptor",
    "resolve_direct_video",
]
