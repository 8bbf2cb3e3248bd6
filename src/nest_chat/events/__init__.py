"""Event plumbing between the chat core and the presentation layer."""

from .bus import Event, EventBus
from .domain import (
    CONTENT_COPIED,
    GENERATION_FAILED,
    SESSION_ACTIVATED,
    SESSIONS_CHANGED,
    ActiveSessionChanged,
    ContentCopied,
    GenerationFailed,
    SessionsChanged,
)

__all__ = [
    "ActiveSessionChanged",
    "CONTENT_COPIED",
    "ContentCopied",
    "Event",
    "EventBus",
    "GENERATION_FAILED",
    "GenerationFailed",
    "SESSION_ACTIVATED",
    "SESSIONS_CHANGED",
    "SessionsChanged",
]
