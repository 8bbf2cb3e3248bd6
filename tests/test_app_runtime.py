"""Runtime-style tests for the real Textual app class."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from copy import deepcopy
import unittest
from unittest.mock import Mock

from nest_chat.clipboard import ClipboardController
from nest_chat.config import DEFAULT_CONFIG
from nest_chat.dispatcher import MessageDispatcher
from nest_chat.exceptions import GenerationError
from nest_chat.generation import GenerationResult
from nest_chat.session_store import SessionStore

try:
    from textual.widgets import Input, OptionList

    from nest_chat.app import NestChatApp
    from nest_chat.controller import ChatController
    from nest_chat.widgets import CodeBlock, CopyRequested, MessageBubble
    from nest_chat.widgets.code_block import COPIED_LABEL
except ModuleNotFoundError:
    Input = None  # type: ignore[assignment]
    NestChatApp = None  # type: ignore[assignment,misc]


class _RuntimeFakeClient:
    def __init__(self, reply: str = "hello **there**", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail

    async def generate(self, prompt: str) -> GenerationResult:
        if self.fail:
            return GenerationResult.failure(GenerationError("HTTP 503"))
        return GenerationResult.success(self.reply)


class _GatedRuntimeClient:
    """Hold each reply until its prompt is released."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Event] = {}

    def release(self, prompt: str) -> None:
        self.gates.setdefault(prompt, asyncio.Event()).set()

    async def generate(self, prompt: str) -> GenerationResult:
        await self.gates.setdefault(prompt, asyncio.Event()).wait()
        return GenerationResult.success(f"reply {prompt}")


@unittest.skipIf(NestChatApp is None, "textual is not installed")
class AppRuntimeTests(unittest.IsolatedAsyncioTestCase):
    """Drive the core through the real app to check the view follows along."""

    def _build_app(
        self,
        client: _RuntimeFakeClient | _GatedRuntimeClient,
        writer: Callable[[str], None] | None = None,
    ) -> NestChatApp:
        store = SessionStore(welcome_message="Welcome")
        self.copied: list[str] = []
        controller = ChatController(
            store,
            MessageDispatcher(store, client),
            ClipboardController(writer=writer or self.copied.append),
        )
        return NestChatApp(config=deepcopy(DEFAULT_CONFIG), controller=controller)

    async def test_seed_session_is_rendered(self) -> None:
        app = self._build_app(_RuntimeFakeClient())
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertEqual(len(app.query(MessageBubble)), 1)
            session_list = app.query_one("#session-list", OptionList)
            self.assertEqual(session_list.option_count, 1)

    async def test_send_renders_prompt_and_reply(self) -> None:
        app = self._build_app(_RuntimeFakeClient())
        async with app.run_test() as pilot:
            input_widget = app.query_one("#message_input", Input)
            input_widget.value = "hi"
            await pilot.pause()
            await app.controller.on_send_requested("hi")
            await pilot.pause()
            self.assertEqual(len(app.query(MessageBubble)), 3)
            self.assertEqual(input_widget.value, "")
            self.assertEqual(app.sub_title, "")

    async def test_failure_shows_fallback_and_notifies(self) -> None:
        app = self._build_app(_RuntimeFakeClient(fail=True))
        app.notify = Mock()  # type: ignore[method-assign]
        async with app.run_test() as pilot:
            await app.controller.on_send_requested("hi")
            await pilot.pause()
            bubbles = list(app.query(MessageBubble))
            self.assertEqual(len(bubbles), 3)
            self.assertEqual(
                bubbles[-1].message.text, app.controller.dispatcher.reply_fallback
            )
            app.notify.assert_called_once()
            self.assertEqual(app.notify.call_args.kwargs["severity"], "error")

    async def test_new_session_is_listed_and_shown(self) -> None:
        app = self._build_app(_RuntimeFakeClient(reply="Fresh start"))
        async with app.run_test() as pilot:
            await app.controller.on_new_session_requested()
            await pilot.pause()
            session_list = app.query_one("#session-list", OptionList)
            self.assertEqual(session_list.option_count, 2)
            self.assertEqual(session_list.highlighted, 1)
            bubbles = list(app.query(MessageBubble))
            self.assertEqual([b.message.text for b in bubbles], ["Fresh start"])

    async def test_code_block_copy_updates_label(self) -> None:
        app = self._build_app(_RuntimeFakeClient(reply="Run:\n```sh\nls -la\n```"))
        async with app.run_test() as pilot:
            await app.controller.on_send_requested("how do I list files?")
            await pilot.pause()
            blocks = list(app.query(CodeBlock))
            self.assertEqual(len(blocks), 1)
            block = blocks[0]
            await app.on_copy_requested(CopyRequested(block.target_id, block.code))
            await pilot.pause()
            self.assertEqual(self.copied, ["ls -la"])
            self.assertTrue(app.controller.clipboard.is_copied(block.target_id))
            button = block.query_one(".copy-btn")
            self.assertEqual(str(button.label), COPIED_LABEL)

    async def test_overlapping_sends_render_each_message_once(self) -> None:
        client = _GatedRuntimeClient()
        app = self._build_app(client)
        async with app.run_test() as pilot:
            first = asyncio.create_task(app.controller.on_send_requested("a"))
            second = asyncio.create_task(app.controller.on_send_requested("b"))
            await pilot.pause()
            client.release("a")
            client.release("b")
            await asyncio.gather(first, second)
            await pilot.pause()
            rendered = [bubble.message.text for bubble in app.query(MessageBubble)]
            stored = [
                message.text for message in app.controller.active_session.messages
            ]
            self.assertEqual(len(stored), 5)
            self.assertEqual(rendered, stored)

    async def test_clipboard_failure_notifies_and_keeps_running(self) -> None:
        def broken_writer(_text: str) -> None:
            raise OSError("no clipboard")

        app = self._build_app(_RuntimeFakeClient(), writer=broken_writer)
        app.notify = Mock()  # type: ignore[method-assign]
        async with app.run_test() as pilot:
            await pilot.pause()
            bubble = app.query_one(MessageBubble)
            with self.assertLogs("nest_chat.clipboard", level="ERROR"):
                bubble.post_message(CopyRequested(bubble.target_id, bubble.message.text))
                await pilot.pause(0.1)
            self.assertTrue(app.is_running)
            app.notify.assert_called_once()
            self.assertEqual(app.notify.call_args.kwargs["severity"], "error")
            self.assertIn("no clipboard", app.notify.call_args.args[0])
            self.assertFalse(app.controller.clipboard.is_copied(bubble.target_id))


if __name__ == "__main__":
    unittest.main()
