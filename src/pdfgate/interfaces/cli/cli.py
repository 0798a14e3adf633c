from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from pdfgate.infrastructure.config import load_config
from pdfgate.infrastructure.logging.setup import configure_logging
from pdfgate.interfaces.app import create_app

log = structlog.get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pdfgate")

    # Server options
    parser.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    parser.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--max-concurrent",
        default=None,
        type=int,
        help="Override the number of concurrent renders.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(argv)


def build_cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    cli_overrides: dict[str, Any] = {}
    if args.max_concurrent is not None:
        cli_overrides["max_concurrent"] = args.max_concurrent
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    return cli_overrides


def resolve_bind(args: argparse.Namespace) -> tuple[str, int]:
    host = args.host or os.getenv("HOST", DEFAULT_HOST)
    port = int(args.port or os.getenv("PORT", str(DEFAULT_PORT)))
    return host, port


def start(argv: Iterable[str] | None = None) -> None:
    """
    Process entrypoint.

    Config is loaded exactly once here, then the FastAPI app is built with it.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    host, port = resolve_bind(args)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=build_cli_overrides(args),
    )

    log_config = configure_logging(config)
    log.info("server_starting", host=host, port=port)

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )


if __name__ == "__main__":
    raise SystemExit(start())
