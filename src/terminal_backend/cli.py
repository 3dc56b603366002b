#!/usr/bin/env python3
"""Command-line entry point for the terminal backend server.

Usage:
    terminal-backend
    python -m terminal_backend --port 8080 --log-level DEBUG
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from .api import create_app
from .config import load_settings, startup_summary

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terminal-backend",
        description="Serve Stripe Terminal connection tokens and PaymentIntent operations.",
    )
    parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Bind port (default: PORT or 4567)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings()
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level)
    logger.info(">> Starting terminal backend...")
    for name, status in startup_summary(settings).items():
        logger.info(f">> {name}: {status}")

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
