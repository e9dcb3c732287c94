"""Browser-side collaborators: window opener and in-page media controller."""

from voicepilot.environments.browser.opener import (
    ResourceOpener,
    PlaywrightOpener,
    ExternalHandoff,
)
from voicepilot.environments.browser.media import (
    MediaController,
    WebSocketMediaController,
    RecordingMediaController,
)

__all__ = [
    "ResourceOpener",
    "PlaywrightOpener",
    "ExternalHandoff",
    "MediaController",
    "WebSocketMediaController",
    "RecordingMediaController",
]
