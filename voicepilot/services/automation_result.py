"""
Automation Result - outcome of dispatching one Intent.

Extracted to its own module so the dispatcher and the handlers can both
import it without importing each other.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AutomationResult:
    """
    Result of executing an automation.

    Created fresh per dispatch, never mutated after it is returned,
    never persisted directly (only folded into statistics).

    Attributes:
        success: Whether the automation ran
        message: Human-readable summary, input to response generation
        action: Short tag naming what happened (e.g. "music_playing")
        window_reference: Opaque handle of the opened resource, only when one was opened
        window_id: Registry id of the tracked resource, when it was tracked
        metadata: Type-specific details (URLs, platform, timestamps) for observability
    """
    success: bool
    message: str
    action: str
    window_reference: Optional[Any] = None
    window_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for response. The handle itself never leaves the process."""
        return {
            "success": self.success,
            "message": self.message,
            "action": self.action,
            "window_id": self.window_id,
            "window_opened": self.window_reference is not None,
            "metadata": self.metadata,
        }
