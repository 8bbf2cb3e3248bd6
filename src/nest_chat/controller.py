"""Inbound UI requests routed onto the chat core."""

from __future__ import annotations

import logging
from typing import Any

from .clipboard import ClipboardController
from .dispatcher import DispatchOutcome, MessageDispatcher
from .events import CONTENT_COPIED, ContentCopied, EventBus
from .generation import GenerationClient
from .models import Session
from .session_store import SessionStore

LOGGER = logging.getLogger(__name__)


class ChatController:
    """Single entry point the presentation layer talks to.

    Accepts ``on_send_requested``, ``on_new_session_requested``,
    ``on_copy_requested`` and ``on_session_selected``; state changes flow back
    out through ``bus``.
    """

    def __init__(
        self,
        store: SessionStore,
        dispatcher: MessageDispatcher,
        clipboard: ClipboardController,
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self.clipboard = clipboard

    @classmethod
    def from_config(
        cls,
        config: dict[str, dict[str, Any]],
        client: Any | None = None,
        bus: EventBus | None = None,
    ) -> ChatController:
        """Build the whole core from a validated config mapping."""
        generation_cfg = config["generation"]
        session_cfg = config["session"]
        store = SessionStore(
            welcome_message=str(session_cfg["welcome_message"]),
            seed_title=str(session_cfg["seed_title"]),
        )
        generation = GenerationClient(
            host=str(generation_cfg["host"]),
            model=str(generation_cfg["model"]),
            timeout=int(generation_cfg["timeout"]),
            client=client,
        )
        dispatcher = MessageDispatcher(
            store,
            generation,
            bus=bus,
            reply_fallback=str(session_cfg["reply_fallback"]),
            new_session_fallback=str(session_cfg["new_session_fallback"]),
            new_session_prompt=str(generation_cfg["new_session_prompt"]),
        )
        clipboard = ClipboardController(
            feedback_ms=int(config["clipboard"]["feedback_ms"])
        )
        return cls(store, dispatcher, clipboard)

    @property
    def bus(self) -> EventBus:
        return self.dispatcher.bus

    @property
    def active_session(self) -> Session:
        return self.store.get_active()

    async def on_send_requested(self, prompt: str) -> DispatchOutcome | None:
        return await self.dispatcher.send(prompt)

    async def on_new_session_requested(self) -> Session:
        return await self.dispatcher.new_session()

    async def on_session_selected(self, session_id: str) -> bool:
        return await self.dispatcher.select_session(session_id)

    async def on_copy_requested(self, target_id: str, text: str) -> None:
        self.clipboard.copy(target_id, text)
        await self.bus.publish(
            CONTENT_COPIED, ContentCopied(target_id), source="controller"
        )
