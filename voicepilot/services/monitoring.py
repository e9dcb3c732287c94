"""
Automation Logger - structured logging for classification and dispatch.

Captures one JSON line per:
- classified utterance (intent type, text preview)
- dispatch outcome (success flag, action, latency)
- dispatch error (wrapped message, original cause)

Log Format:
==========
    [2026-10-19 12:00:00] INFO [voicepilot.automation] Dispatch: {"event": "automation_dispatch", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from voicepilot.core.config import settings

# Configure the automation logger
logger = logging.getLogger("voicepilot.automation")
logger.setLevel(logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper())

# Create console handler if not exists
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _preview(text: str, limit: int = 100) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class AutomationLogger:
    """
    Structured logger for the automation core.

    Usage:
        automation_logger.log_classification("play despacito", "music")
        automation_logger.log_dispatch("music", success=True, action="music_playing", latency_ms=412.5)
    """

    def __init__(self):
        self._logger = logger

    def log_classification(self, text: str, intent_type: str) -> None:
        log_data = {
            "event": "intent_classified",
            "intent_type": intent_type,
            "text_length": len(text),
            "text_preview": _preview(text),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._logger.info(f"Classified: {json.dumps(log_data)}")

    def log_dispatch(
        self,
        intent_type: str,
        success: bool,
        action: Optional[str] = None,
        latency_ms: float = 0.0,
        window_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the outcome of one dispatch, successful or not."""
        log_data = {
            "event": "automation_dispatch",
            "intent_type": intent_type,
            "success": success,
            "action": action,
            "window_id": window_id,
            "latency_ms": round(latency_ms, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            log_data["metadata"] = metadata

        if success:
            self._logger.info(f"Dispatch: {json.dumps(log_data, default=str)}")
        else:
            self._logger.warning(f"Dispatch: {json.dumps(log_data, default=str)}")

    def log_error(
        self,
        intent_type: str,
        error: str,
        error_type: str = "unknown",
        cause: Optional[str] = None,
    ) -> None:
        log_data = {
            "event": "automation_error",
            "intent_type": intent_type,
            "error_type": error_type,
            "error": error,
            "cause": cause,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._logger.error(f"Automation Error: {json.dumps(log_data)}")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
automation_logger = AutomationLogger()
