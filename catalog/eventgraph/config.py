"""
Configuration for eventgraph.

All settings load from environment variables via pydantic-settings, using
the ``EVENTGRAPH_`` prefix. A few settings also honour the names used by
existing catalog deployments (``PROJECT_DIR``, ``DISABLE_EVENTCATALOG_CACHE``,
``LLMS_TXT_BASE_URL``) so the engine can be dropped into a catalog project
without renaming its environment.

Invariants:
    - Settings are read once per Settings() construction, never cached globally
    - Layout constants default to the values the graph views are tuned for

How to change safely:
    - Add new fields with defaults
    - Keep legacy aliases working when renaming a field
"""

from __future__ import annotations

import logging
import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """eventgraph configuration loaded from environment."""

    # Content
    content_dir: str = Field(default=".", description="Root directory of authored catalog content")
    project_dir: str = Field(
        default_factory=os.getcwd,
        validation_alias=AliasChoices("EVENTGRAPH_PROJECT_DIR", "PROJECT_DIR"),
        description="Catalog project directory used for resource folder lookups",
    )

    # Enrichment cache
    disable_cache: bool = Field(
        default=False,
        validation_alias=AliasChoices("EVENTGRAPH_DISABLE_CACHE", "DISABLE_EVENTCATALOG_CACHE"),
        description="Recompute enriched collections on every call",
    )

    # HTTP server
    http_host: str = Field(default="0.0.0.0", description="HTTP bind host")
    http_port: int = Field(default=8080, description="HTTP bind port")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:4321"],
        description="Allowed CORS origins",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # Text export
    public_base_url: str = Field(
        default="",
        validation_alias=AliasChoices("EVENTGRAPH_PUBLIC_BASE_URL", "LLMS_TXT_BASE_URL"),
        description="Base URL prefixed to links in llms.txt",
    )
    organization_name: str = Field(default="EventCatalog", description="Heading of the text export")
    tagline: str = Field(default="", description="Summary line of the text export")

    # Layout
    node_width: int = Field(default=150, description="Layout width of every node")
    node_height: int = Field(default=100, description="Layout height of every node")
    rank_sep: int = Field(default=300, description="Horizontal gap between ranks")
    node_sep: int = Field(default=50, description="Vertical gap between nodes of one rank")

    model_config = {"env_prefix": "EVENTGRAPH_", "populate_by_name": True}

    def log_config(self) -> None:
        """Log configuration (safe for production logs)."""
        logger.info(
            "eventgraph configuration",
            extra={
                "content_dir": self.content_dir,
                "project_dir": self.project_dir,
                "disable_cache": self.disable_cache,
                "http": f"{self.http_host}:{self.http_port}",
                "log_format": self.log_format,
            },
        )
