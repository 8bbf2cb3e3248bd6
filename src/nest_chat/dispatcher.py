"""Send pipeline: optimistic user append, one generate call, reply or fallback."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING

from .events import (
    GENERATION_FAILED,
    SESSION_ACTIVATED,
    SESSIONS_CHANGED,
    ActiveSessionChanged,
    EventBus,
    GenerationFailed,
    SessionsChanged,
)
from .exceptions import GenerationError
from .models import Message, Session

if TYPE_CHECKING:
    from .generation import GenerationClient
    from .session_store import SessionStore

LOGGER = logging.getLogger(__name__)

NEW_SESSION_PROMPT = "Start a new conversation"
REPLY_FALLBACK = (
    "I'm sorry, I couldn't process your request at the moment. "
    "Please try again later."
)
NEW_SESSION_FALLBACK = "Welcome to a new conversation. How can I help you?"

_FAILURE_TITLE = "Connection Error"
_REPLY_FAILURE_DESCRIPTION = "Failed to connect to AI service. Please try again."
_NEW_SESSION_FAILURE_DESCRIPTION = (
    "Failed to initialize new chat. Using default welcome message."
)


class SendState(str, Enum):
    """Lifecycle of a single send operation."""

    IDLE = "IDLE"
    SENDING = "SENDING"
    SETTLED = "SETTLED"


@dataclass(frozen=True)
class DispatchOutcome:
    """What one accepted send did to its session."""

    state: SendState
    session_id: str
    user_message: Message
    reply: Message
    error: GenerationError | None = None

    @property
    def used_fallback(self) -> bool:
        return self.error is not None


class MessageDispatcher:
    """Orchestrate sends and new-session creation against a ``SessionStore``.

    Sends are not serialised: a second send may start while the first is still
    waiting on the network, and replies land in completion order.
    """

    def __init__(
        self,
        store: SessionStore,
        client: GenerationClient,
        bus: EventBus | None = None,
        reply_fallback: str = REPLY_FALLBACK,
        new_session_fallback: str = NEW_SESSION_FALLBACK,
        new_session_prompt: str = NEW_SESSION_PROMPT,
    ) -> None:
        self.store = store
        self.client = client
        self.bus = bus or EventBus()
        self.reply_fallback = reply_fallback
        self.new_session_fallback = new_session_fallback
        self.new_session_prompt = new_session_prompt
        self.draft = ""
        self.in_flight = 0

    @staticmethod
    def accepts(prompt: str) -> bool:
        """Return True for prompts that would start a send."""
        return bool(prompt and prompt.strip())

    async def _publish_sessions(self) -> None:
        await self.bus.publish(
            SESSIONS_CHANGED,
            SessionsChanged(
                sessions=self.store.snapshot(),
                active_session_id=self.store.active_session_id,
            ),
            source="dispatcher",
        )

    async def _publish_failure(self, description: str, error: GenerationError) -> None:
        await self.bus.publish(
            GENERATION_FAILED,
            GenerationFailed(
                title=_FAILURE_TITLE, description=description, error=error
            ),
            source="dispatcher",
        )

    async def send(self, prompt: str) -> DispatchOutcome | None:
        """Append ``prompt`` to the active session and settle it with a reply.

        Returns None without touching anything when the prompt is empty or
        whitespace only.
        """
        if not self.accepts(prompt):
            LOGGER.debug(
                "dispatch.send.rejected", extra={"event": "dispatch.send.rejected"}
            )
            return None

        session_id = self.store.get_active().id
        user_message = Message.from_user(prompt)
        self.store.append_message(session_id, user_message)
        self.draft = ""
        self.in_flight += 1
        LOGGER.info(
            "dispatch.send.start",
            extra={
                "event": "dispatch.send.start",
                "session_id": session_id,
                "state": SendState.SENDING.value,
                "in_flight": self.in_flight,
            },
        )
        await self._publish_sessions()

        try:
            result = await self.client.generate(prompt)
        finally:
            self.in_flight -= 1

        if result.ok and result.text is not None:
            reply = Message.from_assistant(result.text)
        else:
            reply = Message.from_assistant(self.reply_fallback)
        self.store.append_message(session_id, reply)
        LOGGER.info(
            "dispatch.send.settled",
            extra={
                "event": "dispatch.send.settled",
                "session_id": session_id,
                "state": SendState.SETTLED.value,
                "fallback": not result.ok,
            },
        )
        await self._publish_sessions()
        if result.error is not None:
            await self._publish_failure(_REPLY_FAILURE_DESCRIPTION, result.error)

        return DispatchOutcome(
            state=SendState.SETTLED,
            session_id=session_id,
            user_message=user_message,
            reply=reply,
            error=result.error,
        )

    async def new_session(self) -> Session:
        """Ask the service for a greeting, then create and activate a session."""
        self.in_flight += 1
        try:
            result = await self.client.generate(self.new_session_prompt)
        finally:
            self.in_flight -= 1
        if result.ok and result.text is not None:
            greeting = result.text
        else:
            greeting = self.new_session_fallback
        session = self.store.create_session(greeting)
        self.store.set_active(session.id)
        LOGGER.info(
            "dispatch.session.created",
            extra={
                "event": "dispatch.session.created",
                "session_id": session.id,
                "fallback": not result.ok,
            },
        )
        await self._publish_sessions()
        await self.bus.publish(
            SESSION_ACTIVATED, ActiveSessionChanged(session.id), source="dispatcher"
        )
        if result.error is not None:
            await self._publish_failure(_NEW_SESSION_FAILURE_DESCRIPTION, result.error)
        return session

    async def select_session(self, session_id: str) -> bool:
        """Activate an existing session; unknown ids are ignored."""
        changed = self.store.set_active(session_id)
        if changed:
            await self.bus.publish(
                SESSION_ACTIVATED, ActiveSessionChanged(session_id), source="dispatcher"
            )
        return changed
