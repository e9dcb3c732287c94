"""
Configuration module - centralized settings for the automation core.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export DATABASE_URL=sqlite:////var/lib/voicepilot/voicepilot.db
        export BROWSER_HEADLESS=true
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs and logging
    APP_NAME: str = "VoicePilot Automation Core"

    # DEBUG: Enable debug mode (more verbose logs)
    DEBUG: bool = False

    # LOG_LEVEL: Level of the "voicepilot" logger hierarchy
    LOG_LEVEL: str = "INFO"

    # ---------------------------------------------------------------------------
    # DURABLE STORAGE
    # ---------------------------------------------------------------------------
    # DATABASE_URL: Backing database for the key-value store.
    # SQLite is enough for a single assistant instance; any SQLAlchemy URL works.
    DATABASE_URL: str = "sqlite:///./voicepilot.db"

    # STATS_STORAGE_KEY: Key under which automation statistics are persisted
    STATS_STORAGE_KEY: str = "automationStats"

    # STATS_HISTORY_LIMIT: Most-recent executions kept in the history list
    STATS_HISTORY_LIMIT: int = 50

    # ---------------------------------------------------------------------------
    # WINDOW TRACKING
    # ---------------------------------------------------------------------------
    # WINDOW_POLL_INTERVAL_SECONDS: How often each tracked window is checked
    # for closure by its liveness poll.
    WINDOW_POLL_INTERVAL_SECONDS: float = 1.0

    # ---------------------------------------------------------------------------
    # BROWSER (external resource opener)
    # ---------------------------------------------------------------------------
    # BROWSER_HEADLESS: Launch Chromium without a visible window.
    # The assistant is meant to open windows the user can see, so default False.
    BROWSER_HEADLESS: bool = False
    BROWSER_VIEWPORT_WIDTH: int = 1200
    BROWSER_VIEWPORT_HEIGHT: int = 800

    # AUTO_CLICK_MAX_ATTEMPTS: Attempts to click the first video result
    # when a music search page was opened instead of a direct video.
    AUTO_CLICK_MAX_ATTEMPTS: int = 5

    # ---------------------------------------------------------------------------
    # CONVERSATIONAL RESPONDER
    # ---------------------------------------------------------------------------
    # CHAT_RELAY_URL: Base URL of the chat relay that answers conversational turns
    CHAT_RELAY_URL: str = "http://localhost:5001/api"

    # CHAT_RELAY_TIMEOUT: Request timeout in seconds
    CHAT_RELAY_TIMEOUT: int = 30

    # ---------------------------------------------------------------------------
    # DESTINATIONS
    # ---------------------------------------------------------------------------
    # GMAIL_DEFAULT_BODY: Body pre-filled in compose windows opened by voice
    GMAIL_DEFAULT_BODY: str = "Hello,\n\nI am writing to you via voice command.\n\nBest regards"


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from voicepilot.core.config import settings
settings = Settings()
