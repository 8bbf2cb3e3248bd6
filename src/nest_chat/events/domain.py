from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import GenerationError
from ..models import Session

SESSIONS_CHANGED = "sessions.changed"
SESSION_ACTIVATED = "session.activated"
GENERATION_FAILED = "generation.failed"
CONTENT_COPIED = "clipboard.copied"


@dataclass(frozen=True)
class SessionsChanged:
    sessions: tuple[Session, ...]
    active_session_id: str


@dataclass(frozen=True)
class ActiveSessionChanged:
    session_id: str


@dataclass(frozen=True)
class GenerationFailed:
    title: str
    description: str
    error: GenerationError


@dataclass(frozen=True)
class ContentCopied:
    target_id: str
