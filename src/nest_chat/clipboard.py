"""Copy intent and the transient "copied" indicator."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import time

LOGGER = logging.getLogger(__name__)

DEFAULT_FEEDBACK_MS = 2000


@dataclass(frozen=True)
class CopyState:
    active_target_id: str | None = None
    expires_at: float | None = None


class ClipboardController:
    """Remember which target was copied last and for how long to say so.

    Expiry is passive: ``is_copied`` compares against the clock on every read.
    The OS clipboard itself is reached through ``writer``.
    """

    def __init__(
        self,
        writer: Callable[[str], None] | None = None,
        feedback_ms: int = DEFAULT_FEEDBACK_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.writer = writer
        self.feedback_seconds = feedback_ms / 1000
        self._clock = clock
        self._state = CopyState()

    @property
    def state(self) -> CopyState:
        return self._state

    def mark_copied(self, target_id: str) -> None:
        self._state = CopyState(
            active_target_id=target_id,
            expires_at=self._clock() + self.feedback_seconds,
        )

    def is_copied(self, target_id: str) -> bool:
        state = self._state
        if state.active_target_id != target_id or state.expires_at is None:
            return False
        return self._clock() < state.expires_at

    def clear(self) -> None:
        self._state = CopyState()

    def copy(self, target_id: str, text: str) -> None:
        """Hand ``text`` to the clipboard writer and mark ``target_id`` copied."""
        if self.writer is not None:
            try:
                self.writer(text)
            except Exception:
                LOGGER.exception(
                    "clipboard.write.failed",
                    extra={"event": "clipboard.write.failed", "target_id": target_id},
                )
                raise
        self.mark_copied(target_id)
        LOGGER.debug(
            "clipboard.copied",
            extra={"event": "clipboard.copied", "target_id": target_id},
        )
