"""
Command line interface for eventgraph.

Commands:
- graph: Print the graph around one record as JSON
- list: Print an enriched collection as JSON
- export: Print the llms.txt document
- check: Report broken references (non-zero exit in strict mode)
- serve: Run the HTTP API

Usage:
    eventgraph --content-dir ./catalog graph actor CustomerSupportAgent 1.0.0
    eventgraph list views --current
    eventgraph check --strict

Invariants:
    - JSON output is deterministic (sorted keys)
    - check --strict exits 1 when any reference is broken

How to change safely:
    - Add new commands, don't change existing output formats
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional, Sequence

from ..config import Settings
from ..content.base import ContentSource, create_content_source
from ..enrich.pipeline import CATALOG_TYPES, EnrichmentPipeline, validate_catalog
from ..errors import BrokenReferenceError, EventGraphError
from ..export.llms import build_llms_txt
from ..graph.service import GraphService
from ..main import serve, setup_logging
from ..model.types import to_collection

logger = logging.getLogger(__name__)


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, sort_keys=True, default=str)


class CatalogCLI:
    """CLI commands over one content source.

    Example:
        >>> cli = CatalogCLI(InMemoryContentSource({...}), Settings())
        >>> print(asyncio.run(cli.graph("actor", "CustomerSupportAgent", "1.0.0")))
    """

    def __init__(self, source: ContentSource, settings: Settings) -> None:
        self.source = source
        self.settings = settings

    async def graph(
        self, kind: str, entity_id: str, version: str = "latest", mode: str = "simple", layout: bool = True
    ) -> str:
        service = GraphService(self.source, self.settings)
        graph = await service.build(kind, entity_id, version, mode=mode, with_layout=layout)
        return _dump(graph.to_dict())

    async def list_collection(self, name: str, current_only: bool = False) -> str:
        collection = to_collection(name)
        if collection in CATALOG_TYPES:
            pipeline = EnrichmentPipeline(self.source, settings=self.settings)
            items = [item.to_dict() for item in await pipeline.enrich(collection, all_versions=not current_only)]
        else:
            records = await self.source.get_collection(collection)
            items = [record.model_dump(by_alias=True, mode="json") for record in records if not record.hidden]
        return _dump(items)

    async def export(self) -> str:
        return await build_llms_txt(self.source, self.settings)

    async def check(self, strict: bool = False) -> tuple[int, str]:
        """Validate references.

        Returns:
            (exit code, report text)
        """
        diagnostics = await validate_catalog(self.source, self.settings)
        lines = [f"  - {item.message}" for item in diagnostics.items]
        if not lines:
            return 0, "All references resolve"
        report = f"Found {len(lines)} problem(s):\n" + "\n".join(lines)
        if strict:
            try:
                diagnostics.raise_for_broken()
            except BrokenReferenceError as e:
                return 1, f"{report}\n{e.message}"
        return 0, report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="eventgraph", description="Catalog relationship graphs")
    parser.add_argument("--content-dir", help="Catalog content directory (default: EVENTGRAPH_CONTENT_DIR)")
    parser.add_argument("--log-level", help="Log level (default: EVENTGRAPH_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    graph_parser = subparsers.add_parser("graph", help="Print the graph around one record")
    graph_parser.add_argument("kind", help="actor, view, policy, entity, event, command or query")
    graph_parser.add_argument("id", help="Record id")
    graph_parser.add_argument("version", nargs="?", default="latest", help="Version or range (default: latest)")
    graph_parser.add_argument("--mode", choices=["simple", "full"], default="simple")
    graph_parser.add_argument("--no-layout", action="store_true", help="Skip position calculation")

    list_parser = subparsers.add_parser("list", help="Print an enriched collection")
    list_parser.add_argument("collection", help="Collection name")
    list_parser.add_argument("--current", action="store_true", help="Only the latest version of each record")

    subparsers.add_parser("export", help="Print llms.txt")

    check_parser = subparsers.add_parser("check", help="Report broken references")
    check_parser.add_argument("--strict", action="store_true", help="Exit non-zero on broken references")

    subparsers.add_parser("serve", help="Run the HTTP API")
    return parser


def run(argv: Optional[Sequence[str]] = None, source: Optional[ContentSource] = None) -> int:
    """Parse arguments, execute a command and return the exit code."""
    args = build_parser().parse_args(argv)
    overrides = {}
    if args.content_dir:
        overrides["content_dir"] = args.content_dir
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = Settings(**overrides)
    setup_logging(settings, stream=sys.stderr)

    if args.command == "serve":
        serve(settings, source)
        return 0

    cli = CatalogCLI(source or create_content_source(settings), settings)
    try:
        if args.command == "graph":
            output = asyncio.run(cli.graph(args.kind, args.id, args.version, args.mode, not args.no_layout))
        elif args.command == "list":
            output = asyncio.run(cli.list_collection(args.collection, args.current))
        elif args.command == "export":
            output = asyncio.run(cli.export())
        else:
            code, output = asyncio.run(cli.check(args.strict))
            print(output)
            return code
    except EventGraphError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(output)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
