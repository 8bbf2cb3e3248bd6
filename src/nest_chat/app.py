"""Main Textual application for chatting with a generation service."""

from __future__ import annotations

import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Input, OptionList
from textual.widgets.option_list import Option

from .config import load_config
from .controller import ChatController
from .events import (
    CONTENT_COPIED,
    GENERATION_FAILED,
    SESSION_ACTIVATED,
    SESSIONS_CHANGED,
    Event,
)
from .widgets import CodeBlock, ConversationView, CopyRequested, MessageBubble

LOGGER = logging.getLogger(__name__)


class NestChatApp(App[None]):
    """Session drawer on the left, active conversation on the right."""

    CSS = """
    #session-list {
        width: 28;
        border-right: solid $panel;
    }
    #conversation {
        height: 1fr;
        padding: 1 2;
    }
    #input-row {
        height: auto;
        padding: 0 1;
    }
    #message_input {
        width: 1fr;
    }
    #send_button {
        width: auto;
    }
    """

    BINDINGS = [
        Binding("ctrl+n", "new_session", "New chat"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        controller: ChatController | None = None,
    ) -> None:
        super().__init__()
        self.config = config if config is not None else load_config()
        self.title = str(self.config["app"]["title"])
        self.controller = controller or ChatController.from_config(self.config)
        if self.controller.clipboard.writer is None:
            self.controller.clipboard.writer = self.copy_to_clipboard

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            yield OptionList(id="session-list")
            with Vertical():
                yield ConversationView(id="conversation")
                with Horizontal(id="input-row"):
                    yield Input(
                        placeholder="Type your message here...", id="message_input"
                    )
                    yield Button("Send", id="send_button", variant="primary", disabled=True)
        yield Footer()

    async def on_mount(self) -> None:
        bus = self.controller.bus
        bus.subscribe(SESSIONS_CHANGED, self._on_sessions_changed)
        bus.subscribe(SESSION_ACTIVATED, self._on_session_activated)
        bus.subscribe(GENERATION_FAILED, self._on_generation_failed)
        bus.subscribe(CONTENT_COPIED, self._on_content_copied)
        await self._refresh_view()
        self.query_one("#message_input", Input).focus()

    async def _refresh_view(self) -> None:
        store = self.controller.store
        session_list = self.query_one("#session-list", OptionList)
        session_list.clear_options()
        session_list.add_options(
            [Option(session.title, id=session.id) for session in store.sessions]
        )
        active = store.get_active()
        for index, session in enumerate(store.sessions):
            if session.id == active.id:
                session_list.highlighted = index
                break
        await self.query_one("#conversation", ConversationView).show_session(
            active, self.controller.clipboard.is_copied
        )
        self._sync_input()

    def _sync_input(self) -> None:
        """Mirror the dispatcher's pending input into the input widget."""
        input_widget = self.query_one("#message_input", Input)
        draft = self.controller.dispatcher.draft
        if input_widget.value != draft:
            input_widget.value = draft
        in_flight = self.controller.dispatcher.in_flight
        self.sub_title = "Thinking..." if in_flight else ""

    async def _on_sessions_changed(self, _event: Event) -> None:
        await self._refresh_view()

    async def _on_session_activated(self, _event: Event) -> None:
        await self._refresh_view()

    def _on_generation_failed(self, event: Event) -> None:
        self.notify(event.data.description, title=event.data.title, severity="error")

    def _on_content_copied(self, event: Event) -> None:
        self._apply_copy_state()
        self.set_timer(self.controller.clipboard.feedback_seconds, self._apply_copy_state)

    def _apply_copy_state(self) -> None:
        is_copied = self.controller.clipboard.is_copied
        for widget in self.query(CodeBlock):
            widget.set_copied(is_copied(widget.target_id))
        for bubble in self.query(MessageBubble):
            bubble.set_copied(is_copied(bubble.target_id))

    def on_input_changed(self, event: Input.Changed) -> None:
        self.controller.dispatcher.draft = event.value
        self.query_one("#send_button", Button).disabled = not (
            self.controller.dispatcher.accepts(event.value)
        )

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit(event.value)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send_button":
            self._submit(self.query_one("#message_input", Input).value)

    def _submit(self, prompt: str) -> None:
        if not self.controller.dispatcher.accepts(prompt):
            return
        self.run_worker(self.controller.on_send_requested(prompt), group="send")

    async def on_option_list_option_selected(
        self, event: OptionList.OptionSelected
    ) -> None:
        if event.option.id is not None:
            await self.controller.on_session_selected(event.option.id)

    async def on_copy_requested(self, event: CopyRequested) -> None:
        event.stop()
        try:
            await self.controller.on_copy_requested(event.target_id, event.text)
        except Exception as exc:  # noqa: BLE001 - clipboard backends vary by terminal.
            self.notify(
                f"Could not copy to clipboard: {exc}",
                title="Clipboard Error",
                severity="error",
            )

    async def action_new_session(self) -> None:
        self.run_worker(self.controller.on_new_session_requested(), group="session")
