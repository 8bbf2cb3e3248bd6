"""Top-level package for nest-chat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import NestChatApp
    from .clipboard import ClipboardController
    from .config import ensure_config_dir, load_config
    from .controller import ChatController
    from .dispatcher import MessageDispatcher
    from .exceptions import (
        ConfigValidationError,
        GenerationError,
        NestChatError,
        SessionNotFoundError,
    )
    from .formatter import format_response
    from .generation import GenerationClient, GenerationResult
    from .models import Message, Segment, Sender, Session
    from .session_store import SessionStore

__all__ = [
    "ChatController",
    "ClipboardController",
    "ConfigValidationError",
    "GenerationClient",
    "GenerationError",
    "GenerationResult",
    "Message",
    "MessageDispatcher",
    "NestChatApp",
    "NestChatError",
    "Segment",
    "Sender",
    "Session",
    "SessionNotFoundError",
    "SessionStore",
    "ensure_config_dir",
    "format_response",
    "load_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "ChatController": ".controller",
    "ClipboardController": ".clipboard",
    "ConfigValidationError": ".exceptions",
    "GenerationClient": ".generation",
    "GenerationError": ".exceptions",
    "GenerationResult": ".generation",
    "Message": ".models",
    "MessageDispatcher": ".dispatcher",
    "NestChatApp": ".app",
    "NestChatError": ".exceptions",
    "Segment": ".models",
    "Sender": ".models",
    "Session": ".models",
    "SessionNotFoundError": ".exceptions",
    "SessionStore": ".session_store",
    "ensure_config_dir": ".config",
    "format_response": ".formatter",
    "load_config": ".config",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the UI dependency optional at import time."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
