"""Scrollable conversation view widget."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from textual.containers import VerticalScroll

from ..models import Session
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """A scrollable container that hosts the active session's bubbles."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._rendered_ids: list[str] = []
        self._session_id: str | None = None
        self._render_lock = asyncio.Lock()

    async def show_session(
        self, session: Session, is_copied: Callable[[str], bool]
    ) -> None:
        """Render ``session``, mounting only new messages when it is unchanged.

        Refreshes may overlap while several replies are pending; they are
        applied one at a time so each message is mounted once.
        """
        async with self._render_lock:
            message_ids = [message.id for message in session.messages]
            same_prefix = (
                session.id == self._session_id
                and message_ids[: len(self._rendered_ids)] == self._rendered_ids
            )
            if not same_prefix:
                await self.remove_children()
                self._rendered_ids = []
                self._session_id = session.id

            new_messages = session.messages[len(self._rendered_ids) :]
            if not new_messages:
                return
            bubbles = [
                MessageBubble(message, is_copied=is_copied) for message in new_messages
            ]
            await self.mount_all(bubbles)
            self._rendered_ids = message_ids
            self.scroll_end(animate=True)
