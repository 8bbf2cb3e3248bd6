"""Immutable chat data model: messages, sessions, and rendered segments."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
import threading
import time
from typing import Literal

_ID_LOCK = threading.Lock()
_last_id = 0


def new_id() -> str:
    """Return a process-unique id that sorts in creation order.

    Based on the nanosecond wall clock and bumped by one whenever the clock has
    not advanced since the previous call.
    """
    global _last_id
    with _ID_LOCK:
        candidate = time.time_ns()
        _last_id = candidate if candidate > _last_id else _last_id + 1
        return str(_last_id)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Sender(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single chat message. Never edited after creation."""

    text: str
    sender: Sender
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_user(cls, text: str) -> Message:
        return cls(text=text, sender=Sender.USER)

    @classmethod
    def from_assistant(cls, text: str) -> Message:
        return cls(text=text, sender=Sender.ASSISTANT)

    @property
    def is_user(self) -> bool:
        return self.sender is Sender.USER

    def display_time(self) -> str:
        """Return the local ``HH:MM`` label shown beneath a bubble."""
        return self.created_at.astimezone().strftime("%H:%M")


@dataclass(frozen=True)
class Session:
    """One conversation thread. ``messages`` is append-only and never empty."""

    title: str
    messages: tuple[Message, ...]
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("A session must contain at least one message.")

    @classmethod
    def start(cls, title: str, greeting: str) -> Session:
        """Build a new session seeded with a single assistant greeting."""
        return cls(title=title, messages=(Message.from_assistant(greeting),))

    def with_message(self, message: Message) -> Session:
        """Return a copy of this session with ``message`` appended."""
        return replace(self, messages=self.messages + (message,))

    @property
    def last_message(self) -> Message:
        return self.messages[-1]


@dataclass(frozen=True)
class Segment:
    """A typed chunk of formatted message content."""

    kind: Literal["text", "code"]
    content: str
    language: str = ""

    @classmethod
    def text(cls, content: str) -> Segment:
        return cls(kind="text", content=content)

    @classmethod
    def code(cls, content: str, language: str = "") -> Segment:
        return cls(kind="code", content=content, language=language)

    @property
    def is_code(self) -> bool:
        return self.kind == "code"


def segment_target_id(message_id: str, index: int) -> str:
    """Return the clipboard target id for segment ``index`` of a message."""
    return f"{message_id}:{index}"
