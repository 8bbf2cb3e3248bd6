"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label, Static

from ..formatter import format_response
from ..models import Message, segment_target_id
from .code_block import COPIED_LABEL, COPY_LABEL, CodeBlock, CopyRequested


class MessageBubble(Vertical):
    """Render one chat message: prose and code segments plus a time label."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        max-width: 85%;
        padding: 0 1;
        margin: 0 0 1 0;
    }
    MessageBubble.role-user {
        background: $accent 30%;
        margin-left: 8;
    }
    MessageBubble.role-assistant {
        background: $panel;
        margin-right: 8;
    }
    MessageBubble > .prose-segment {
        height: auto;
    }
    MessageBubble > #bubble-footer {
        height: 1;
    }
    MessageBubble > #bubble-footer > #time-label {
        width: 1fr;
        color: $text-muted;
    }
    MessageBubble > #bubble-footer > .copy-btn {
        width: auto;
        min-width: 8;
        height: 1;
        border: none;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        message: Message,
        is_copied: Callable[[str], bool] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.message = message
        self.target_id = message.id
        self._is_copied = is_copied or (lambda _target: False)
        self.add_class(f"role-{message.sender.value}")

    @property
    def role_prefix(self) -> str:
        """Return a human-friendly role label."""
        return "You" if self.message.is_user else "Assistant"

    def compose(self) -> ComposeResult:
        """Compose the bubble from formatted segments and a footer row."""
        if self.message.is_user:
            # User text is shown verbatim, fences and all.
            yield Static(self.message.text, classes="prose-segment", markup=False)
        else:
            for index, segment in enumerate(format_response(self.message.text)):
                if segment.is_code:
                    target_id = segment_target_id(self.message.id, index)
                    yield CodeBlock(
                        segment.content,
                        target_id=target_id,
                        lang=segment.language,
                        copied=self._is_copied(target_id),
                    )
                else:
                    yield Static(segment.content, classes="prose-segment", markup=False)
        with Horizontal(id="bubble-footer"):
            yield Label(
                f"{self.role_prefix} · {self.message.display_time()}", id="time-label"
            )
            yield Button(
                COPIED_LABEL if self._is_copied(self.target_id) else COPY_LABEL,
                classes="copy-btn",
            )

    def set_copied(self, copied: bool) -> None:
        for button in self.query("#bubble-footer > .copy-btn").results(Button):
            button.label = COPIED_LABEL if copied else COPY_LABEL

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.has_class("copy-btn"):
            event.stop()
            self.post_message(CopyRequested(self.target_id, self.message.text))
