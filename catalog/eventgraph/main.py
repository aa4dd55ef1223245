"""
eventgraph - main entry point.

Starts the HTTP API under uvicorn.

Usage:
    python -m catalog.eventgraph.main

Configuration is entirely via environment variables.
See config.py for all available settings.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import json_log_formatter
import uvicorn

from .config import Settings
from .content.base import ContentSource

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings, stream: Optional[TextIO] = None) -> None:
    """Configure logging based on configuration.

    Args:
        settings: eventgraph settings
        stream: Stream to log to (default: stderr)
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Reduce noise from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def serve(settings: Optional[Settings] = None, source: Optional[ContentSource] = None) -> None:
    """Run the HTTP API until interrupted."""
    from .api.http_server import create_app

    settings = settings or Settings()
    app = create_app(settings, source)
    logger.info("Starting HTTP API on %s:%d", settings.http_host, settings.http_port)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_config=None)


def main() -> None:
    settings = Settings()
    setup_logging(settings)
    try:
        serve(settings)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(0)


if __name__ == "__main__":
    main()
