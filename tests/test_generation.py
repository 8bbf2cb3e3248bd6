"""Tests for the generation client and its failure normalisation."""

from __future__ import annotations

import asyncio
import json
import unittest

import httpx
from ollama import AsyncClient

from nest_chat.exceptions import GenerationError
from nest_chat.generation import GenerationClient, GenerationResult


class FakeGenerateClient:
    """Stand-in for ``ollama.AsyncClient`` recording generate calls."""

    def __init__(self, payload: object = None, error: BaseException | None = None) -> None:
        self.payload = payload if payload is not None else {"response": "hello"}
        self.error = error
        self.calls: list[dict[str, object]] = []

    async def generate(self, **kwargs: object) -> object:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.payload


class _ResponseObject:
    def __init__(self, response: str) -> None:
        self.response = response


def _sdk_client(handler) -> AsyncClient:
    """Real SDK client whose HTTP traffic is served by ``handler``."""
    return AsyncClient(
        host="http://localhost:11434", transport=httpx.MockTransport(handler)
    )


class GenerationClientTests(unittest.IsolatedAsyncioTestCase):
    """Validate request shape and the single typed failure outcome."""

    async def test_success_returns_reply_text(self) -> None:
        fake = FakeGenerateClient({"response": "Hi!"})
        client = GenerationClient(model="llama3.2", client=fake)
        result = await client.generate("hello")
        self.assertTrue(result.ok)
        self.assertEqual(result.text, "Hi!")
        self.assertEqual(
            fake.calls, [{"model": "llama3.2", "prompt": "hello", "stream": False}]
        )

    async def test_sdk_object_payload_is_supported(self) -> None:
        client = GenerationClient(client=FakeGenerateClient(_ResponseObject("obj")))
        result = await client.generate("hello")
        self.assertEqual(result.text, "obj")

    async def test_missing_response_field_is_failure(self) -> None:
        client = GenerationClient(client=FakeGenerateClient({"done": True}))
        result = await client.generate("hello")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, GenerationError)
        self.assertIsInstance(result.error.cause, ValueError)

    async def test_transport_exception_is_returned_not_raised(self) -> None:
        cause = ConnectionError("refused")
        client = GenerationClient(client=FakeGenerateClient(error=cause))
        with self.assertLogs("nest_chat.generation", level="WARNING") as logs:
            result = await client.generate("hello")
        self.assertFalse(result.ok)
        self.assertIsNone(result.text)
        self.assertIs(result.error.cause, cause)
        self.assertIs(result.error.__cause__, cause)
        self.assertTrue(any("generation.request.failed" in line for line in logs.output))
        self.assertEqual(logs.records[0].error, "refused")

    async def test_cancellation_propagates(self) -> None:
        client = GenerationClient(
            client=FakeGenerateClient(error=asyncio.CancelledError())
        )
        with self.assertRaises(asyncio.CancelledError):
            await client.generate("hello")

    async def test_http_request_shape_through_sdk(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"model": "llama3.2", "response": "from server", "done": True},
            )

        client = GenerationClient(model="llama3.2", client=_sdk_client(handler))
        result = await client.generate("ping")

        self.assertEqual(result.text, "from server")
        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].method, "POST")
        self.assertEqual(seen[0].url.path, "/api/generate")
        body = json.loads(seen[0].content)
        self.assertEqual(body["prompt"], "ping")
        self.assertEqual(body["model"], "llama3.2")
        self.assertIs(body["stream"], False)

    async def test_non_2xx_status_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        client = GenerationClient(client=_sdk_client(handler))
        result = await client.generate("ping")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, GenerationError)

    async def test_unparseable_body_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        client = GenerationClient(client=_sdk_client(handler))
        result = await client.generate("ping")
        self.assertFalse(result.ok)

    async def test_connect_error_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = GenerationClient(client=_sdk_client(handler))
        result = await client.generate("ping")
        self.assertFalse(result.ok)

    def test_result_constructors(self) -> None:
        self.assertTrue(GenerationResult.success("x").ok)
        failed = GenerationResult.failure(GenerationError("nope"))
        self.assertFalse(failed.ok)
        self.assertIsNone(failed.text)


if __name__ == "__main__":
    unittest.main()
