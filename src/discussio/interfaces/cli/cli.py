from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from discussio.infrastructure.config import load_config
from discussio.infrastructure.logging.setup import configure_logging
from discussio.interfaces.app import create_app

log = structlog.get_logger(__name__)

_DEFAULT_PORT = "7000"


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="discussio")

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
        help="Bind port (overrides PORT env, default 7000).",
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
    parser.add_argument(
        "--publish",
        action="store_true",
        default=None,
        help="Publish the manifest to the Stremio central registry at startup.",
    )

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    if args.publish:
        overrides["publish_to_central"] = True
    return overrides


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, then builds the FastAPI app with it.
    Startup failures are logged and turned into exit status 1. Uvicorn
    reports bind and lifespan failures through ``sys.exit``, so SystemExit
    is part of the startup boundary.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    host = args.host or os.getenv("HOST", "0.0.0.0")
    raw_port = args.port or os.getenv("PORT", _DEFAULT_PORT)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_cli_overrides(args),
    )

    log_config = configure_logging(config)

    try:
        port = int(raw_port)
        uvicorn.run(
            create_app(config),
            host=host,
            port=port,
            log_config=log_config,
        )
    except SystemExit as exc:
        if exc.code in (None, 0):
            return 0
        log.error(
            "server_startup_failed",
            host=host,
            port=raw_port,
            exit_code=exc.code,
            exc_info=True,
        )
        return 1
    except Exception:
        log.error("server_startup_failed", host=host, port=raw_port, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
