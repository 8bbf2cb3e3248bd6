"""In-memory collection of chat sessions and the active-session pointer."""

from __future__ import annotations

import logging

from .exceptions import SessionNotFoundError
from .models import Message, Session

LOGGER = logging.getLogger(__name__)

DEFAULT_SEED_TITLE = "New Chat"
DEFAULT_WELCOME_MESSAGE = "Welcome to the Nest. How can I assist you today?"


class SessionStore:
    """Own every session and the pointer to the one on screen.

    Sessions are kept in insertion order and never removed. Each session is an
    immutable value; appending a message swaps in a new value under the same
    id, so snapshots handed out earlier never change underneath a reader.
    """

    def __init__(
        self,
        welcome_message: str = DEFAULT_WELCOME_MESSAGE,
        seed_title: str = DEFAULT_SEED_TITLE,
    ) -> None:
        seed = Session.start(title=seed_title, greeting=welcome_message)
        self._sessions: dict[str, Session] = {seed.id: seed}
        self._active_session_id = seed.id

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @property
    def sessions(self) -> tuple[Session, ...]:
        """Return all sessions in creation order."""
        return tuple(self._sessions.values())

    @property
    def active_session_id(self) -> str:
        """Return the id of the session ``get_active`` resolves to."""
        return self.get_active().id

    def snapshot(self) -> tuple[Session, ...]:
        """Return an immutable view suitable for handing to the UI."""
        return self.sessions

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def get_active(self) -> Session:
        """Return the active session, or the first one if the pointer is stale."""
        session = self._sessions.get(self._active_session_id)
        if session is None:
            LOGGER.debug(
                "store.active.stale",
                extra={
                    "event": "store.active.stale",
                    "session_id": self._active_session_id,
                },
            )
            return next(iter(self._sessions.values()))
        return session

    def create_session(self, greeting: str, title: str | None = None) -> Session:
        """Add a session holding a single assistant greeting and return it.

        The active pointer is left alone; activating the new session is the
        caller's decision.
        """
        if title is None:
            title = f"Chat {len(self._sessions) + 1}"
        session = Session.start(title=title, greeting=greeting)
        self._sessions[session.id] = session
        LOGGER.info(
            "store.session.created",
            extra={
                "event": "store.session.created",
                "session_id": session.id,
                "session_count": len(self._sessions),
            },
        )
        return session

    def set_active(self, session_id: str) -> bool:
        """Point at ``session_id`` if it exists. Unknown ids are ignored."""
        if session_id not in self._sessions:
            LOGGER.debug(
                "store.active.ignored",
                extra={"event": "store.active.ignored", "session_id": session_id},
            )
            return False
        changed = session_id != self._active_session_id
        self._active_session_id = session_id
        return changed

    def append_message(self, session_id: str, message: Message) -> Session:
        """Append ``message`` to a session and return the updated session."""
        current = self.get(session_id)
        updated = current.with_message(message)
        self._sessions[session_id] = updated
        return updated
