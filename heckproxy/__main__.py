"""Command-line entry point: ``python -m heckproxy``."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from .app import create_app
from .config_loader import load_config
from .settings import GatewaySettings

logger = logging.getLogger("heckproxy")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="OpenAI-compatible gateway for the sentinel SSE chat upstream"
    )
    parser.add_argument("--config", default=None, help="Path to config file")
    parser.add_argument("--host", default=None, help="Bind host (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = GatewaySettings.from_config(load_config(args.config))
    app = create_app(settings=settings)
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Starting server on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
