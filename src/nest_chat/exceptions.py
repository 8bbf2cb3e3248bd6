"""Domain exception hierarchy for the nest chat client."""

from __future__ import annotations


class NestChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class GenerationError(NestChatError):
    """Any failure reaching the generation endpoint.

    Returned inside a failed ``GenerationResult`` rather than raised. The
    transport or parse failure that caused it is kept on ``cause``.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class SessionNotFoundError(NestChatError, LookupError):
    """Raised when a session id does not reference a known session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Unknown session id {session_id!r}.")
        self.session_id = session_id


class ConfigValidationError(NestChatError):
    """Raised when configuration cannot be validated safely."""
