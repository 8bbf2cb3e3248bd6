"""Single-shot client for an Ollama-compatible ``/api/generate`` endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Any

from ollama import AsyncClient

from .exceptions import GenerationError

LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generate call: reply text on success, error otherwise."""

    text: str | None = None
    error: GenerationError | None = None

    @classmethod
    def success(cls, text: str) -> GenerationResult:
        return cls(text=text)

    @classmethod
    def failure(cls, error: GenerationError) -> GenerationResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


class GenerationClient:
    """Wrap the one outbound operation: generate a reply for a prompt.

    Every transport, status, or parse failure comes back as a failed
    ``GenerationResult``; nothing but cancellation escapes ``generate``. One
    request per call, no retries.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        model: str = DEFAULT_MODEL,
        timeout: int = 120,
        client: Any | None = None,
    ) -> None:
        self.host = host
        self.model = model
        self.timeout = timeout
        self._client = client if client is not None else AsyncClient(
            host=host, timeout=timeout
        )

    @staticmethod
    def _extract_response(payload: Any) -> str:
        """Pull the ``response`` string out of an SDK object or plain dict."""
        value = getattr(payload, "response", None)
        if value is None and isinstance(payload, dict):
            value = payload.get("response")
        if not isinstance(value, str):
            raise ValueError("Generation response body has no 'response' string.")
        return value

    async def generate(self, prompt: str) -> GenerationResult:
        """Send ``prompt`` and return the reply text or a ``GenerationError``."""
        LOGGER.debug(
            "generation.request.start",
            extra={
                "event": "generation.request.start",
                "model": self.model,
                "prompt_chars": len(prompt),
            },
        )
        try:
            payload = await self._client.generate(
                model=self.model, prompt=prompt, stream=False
            )
            text = self._extract_response(payload)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - external API can fail in many ways.
            error = GenerationError(
                f"Generation request to {self.host} failed: {exc}", cause=exc
            )
            error.__cause__ = exc
            LOGGER.warning(
                "generation.request.failed",
                extra={
                    "event": "generation.request.failed",
                    "host": self.host,
                    "error_type": exc.__class__.__name__,
                    "error": str(exc),
                },
            )
            return GenerationResult.failure(error)

        LOGGER.debug(
            "generation.request.complete",
            extra={"event": "generation.request.complete", "reply_chars": len(text)},
        )
        return GenerationResult.success(text)
