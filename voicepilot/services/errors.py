"""
Automation errors - the failure taxonomy of the dispatch path.

Classification never raises: an utterance nobody understands is a
ConversationIntent, not an exception. Everything below is raised (or,
for PersistenceFailure, logged) somewhere between dispatch and the
external collaborators.
"""

from typing import Optional


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------
# Using custom exceptions allows for precise error handling in routes.


class AutomationError(Exception):
    """Base exception for all automation errors."""
    pass


class AutomationOpenFailure(AutomationError):
    """
    Raised when a destination could not be opened (the opener returned None).

    The message names the destination and, when one is known, a remedy
    the user can act on (usually the popup blocker).
    """

    def __init__(self, destination: str, remedy: Optional[str] = None, message: Optional[str] = None):
        if message is None:
            message = f"Unable to open {destination}."
            if remedy:
                message = f"{message} {remedy}"
        super().__init__(message)
        self.destination = destination
        self.remedy = remedy


class UnknownIntentType(AutomationError):
    """Raised when no handler is registered for an intent type."""

    def __init__(self, intent_type: str):
        super().__init__(f"Unknown automation type: {intent_type}")
        self.intent_type = intent_type


class HandlerException(AutomationError):
    """
    Any failure inside a handler, wrapped with the intent type.

    This is what dispatch re-raises to its caller once statistics and
    events have been recorded. The original exception is __cause__.
    """

    def __init__(self, intent_type: str, cause: BaseException):
        super().__init__(f"Failed to execute {intent_type} command: {cause}")
        self.intent_type = intent_type
        self.cause = cause


class PersistenceFailure(AutomationError):
    """Raised by key-value stores; the statistics tracker logs and swallows it."""
    pass
