"""Code block widget with a copy-to-clipboard button."""

from __future__ import annotations

from typing import Any

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Label, Static

COPY_LABEL = "⎘ copy"
COPIED_LABEL = "✓ copied"


class CopyRequested(Message):
    """Posted when the user asks to copy a message or a code segment."""

    def __init__(self, target_id: str, text: str) -> None:
        super().__init__()
        self.target_id = target_id
        self.text = text


class CodeBlock(Vertical):
    """Render a code segment with a copy button in the top-right corner."""

    DEFAULT_CSS = """
    CodeBlock {
        height: auto;
        margin: 1 0;
        border: solid $panel;
        background: $surface-darken-1;
    }
    CodeBlock > #code-header {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    CodeBlock > #code-header > #lang-label {
        width: 1fr;
        color: $text-muted;
    }
    CodeBlock > #code-header > .copy-btn {
        width: auto;
        min-width: 8;
        height: 1;
        border: none;
        background: $panel;
        color: $text;
        padding: 0 1;
    }
    CodeBlock > #code-header > .copy-btn:hover {
        background: $accent;
    }
    CodeBlock > #code-body {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(
        self, code: str, target_id: str, lang: str = "", copied: bool = False, **kwargs: Any
    ) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.target_id = target_id
        self.lang = lang
        self._copied = copied

    def compose(self) -> ComposeResult:
        """Compose header (lang label + copy button) and syntax-highlighted body."""
        with Horizontal(id="code-header"):
            yield Label(self.lang or "code", id="lang-label")
            yield Button(
                COPIED_LABEL if self._copied else COPY_LABEL, classes="copy-btn"
            )
        syntax = Syntax(
            self.code,
            self.lang or "text",
            theme="monokai",
            line_numbers=False,
            word_wrap=True,
        )
        yield Static(syntax, id="code-body")

    def set_copied(self, copied: bool) -> None:
        """Swap the button label between its idle and "copied" text."""
        self._copied = copied
        for button in self.query(".copy-btn").results(Button):
            button.label = COPIED_LABEL if copied else COPY_LABEL

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle copy button click."""
        if event.button.has_class("copy-btn"):
            event.stop()
            self.post_message(CopyRequested(self.target_id, self.code))
