"""Tests for copy intent and the transient copied indicator."""

from __future__ import annotations

import unittest

from nest_chat.clipboard import ClipboardController, CopyState


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class ClipboardControllerTests(unittest.TestCase):
    """Validate the two-second copied window."""

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.copied: list[str] = []
        self.controller = ClipboardController(
            writer=self.copied.append, clock=self.clock
        )

    def test_copied_immediately_after_mark(self) -> None:
        self.controller.mark_copied("m1")
        self.assertTrue(self.controller.is_copied("m1"))

    def test_other_targets_are_never_copied(self) -> None:
        self.assertFalse(self.controller.is_copied("m2"))
        self.controller.mark_copied("m1")
        self.assertFalse(self.controller.is_copied("m2"))

    def test_indicator_expires_after_two_seconds(self) -> None:
        self.controller.mark_copied("m1")
        self.clock.now = 101.5
        self.assertTrue(self.controller.is_copied("m1"))
        self.clock.now = 102.0
        self.assertFalse(self.controller.is_copied("m1"))

    def test_new_copy_replaces_previous_target(self) -> None:
        self.controller.mark_copied("m1")
        self.controller.mark_copied("m2")
        self.assertFalse(self.controller.is_copied("m1"))
        self.assertTrue(self.controller.is_copied("m2"))

    def test_state_records_expiry(self) -> None:
        self.assertEqual(self.controller.state, CopyState())
        self.controller.mark_copied("m1")
        self.assertEqual(self.controller.state, CopyState("m1", 102.0))

    def test_copy_writes_text_then_marks(self) -> None:
        self.controller.copy("m1:1", "print(1)")
        self.assertEqual(self.copied, ["print(1)"])
        self.assertTrue(self.controller.is_copied("m1:1"))

    def test_writer_failure_does_not_mark(self) -> None:
        def broken(_text: str) -> None:
            raise OSError("no clipboard")

        controller = ClipboardController(writer=broken, clock=self.clock)
        with self.assertLogs("nest_chat.clipboard", level="ERROR"):
            with self.assertRaises(OSError):
                controller.copy("m1", "text")
        self.assertFalse(controller.is_copied("m1"))

    def test_custom_feedback_window(self) -> None:
        controller = ClipboardController(feedback_ms=500, clock=self.clock)
        controller.mark_copied("m1")
        self.clock.now += 0.5
        self.assertFalse(controller.is_copied("m1"))

    def test_clear(self) -> None:
        self.controller.mark_copied("m1")
        self.controller.clear()
        self.assertFalse(self.controller.is_copied("m1"))


if __name__ == "__main__":
    unittest.main()
