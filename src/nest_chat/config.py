"""Configuration loading and validation for the nest chat client."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigValidationError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "nest-chat"
CONFIG_PATH = CONFIG_DIR / "config.toml"

HOST_ENV_VAR = "NEST_CHAT_HOST"
MODEL_ENV_VAR = "NEST_CHAT_MODEL"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _non_empty_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Expected a string value.")
    normalized = value.strip()
    if not normalized:
        raise ValueError("String value must not be empty.")
    return normalized


class AppConfig(BaseModel):
    """Application metadata."""

    title: str = "Nest Chat"

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> str:
        return _non_empty_string(value)


class GenerationConfig(BaseModel):
    """Generation endpoint and model settings."""

    host: str = "http://localhost:11434"
    model: str = "llama3.2"
    timeout: int = Field(default=120, ge=1, le=3600)
    new_session_prompt: str = "Start a new conversation"

    @field_validator("model", "new_session_prompt", mode="before")
    @classmethod
    def _validate_required_string(cls, value: Any) -> str:
        return _non_empty_string(value)

    @field_validator("host", mode="before")
    @classmethod
    def _validate_host(cls, value: Any) -> str:
        normalized = _non_empty_string(value).rstrip("/")
        parsed = urlparse(normalized)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("generation.host must use http or https scheme.")
        if not (parsed.hostname or "").strip():
            raise ValueError("generation.host must include a hostname.")
        return normalized


class SessionConfig(BaseModel):
    """Seed session and fallback copy shown in the conversation."""

    seed_title: str = "New Chat"
    welcome_message: str = "Welcome to the Nest. How can I assist you today?"
    new_session_fallback: str = "Welcome to a new conversation. How can I help you?"
    reply_fallback: str = (
        "I'm sorry, I couldn't process your request at the moment. "
        "Please try again later."
    )

    @field_validator("*", mode="before")
    @classmethod
    def _validate_text(cls, value: Any) -> str:
        return _non_empty_string(value)


class ClipboardConfig(BaseModel):
    """How long the "copied" indicator stays up."""

    feedback_ms: int = Field(default=2000, ge=100, le=60_000)


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/nest-chat/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        return _non_empty_string(value)


class Config(BaseModel):
    """Root configuration model for all sections."""

    app: AppConfig = AppConfig()
    generation: GenerationConfig = GenerationConfig()
    session: SessionConfig = SessionConfig()
    clipboard: ClipboardConfig = ClipboardConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(
    data: dict[str, Any], environ: Mapping[str, str]
) -> dict[str, Any]:
    """Let the environment pick the endpoint without editing the config file."""
    overrides: dict[str, Any] = {}
    host = environ.get(HOST_ENV_VAR, "").strip()
    if host:
        overrides["host"] = host
    model = environ.get(MODEL_ENV_VAR, "").strip()
    if model:
        overrides["model"] = model
    if not overrides:
        return data
    return _deep_merge(data, {"generation": overrides})


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        config = Config.model_validate(raw)
        return config.model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults and environment, and validate.

    The optional ``config_path`` and ``environ`` arguments are intended for
    tests and tooling.
    """
    target_path = config_path or CONFIG_PATH
    ensure_config_dir(target_path.parent)

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (
            Exception
        ) as exc:  # noqa: BLE001 - we must not crash on invalid user config.
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    merged = _deep_merge(DEFAULT_CONFIG, raw_data)
    merged = _apply_env_overrides(merged, os.environ if environ is None else environ)
    return _validate_config(merged)
