"""CLI entrypoint for nest-chat."""

from __future__ import annotations

import argparse
from importlib import metadata
from pathlib import Path
from typing import Sequence

from .app import NestChatApp
from .config import ensure_config_dir, load_config
from .logging_utils import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nest-chat", description="Nest Chat TUI")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a config.toml (defaults to ~/.config/nest-chat/config.toml)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("nest-chat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"nest-chat {version}")
        return

    ensure_config_dir()
    config = load_config(args.config)
    configure_logging(config["logging"])
    app = NestChatApp(config=config)
    app.run()


if __name__ == "__main__":
    main()
