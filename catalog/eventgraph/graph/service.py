"""
Graph service: load a snapshot and build the graph for one focal record.

Graphs are never cached; each build loads a fresh snapshot from the
content source (sources are free to cache underneath).
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, Optional

from ..config import Settings
from ..content.base import ContentSource
from ..errors import UnknownGraphKindError
from ..model.types import CollectionName
from .actor import build_actor_graph
from .entity import build_entity_graph
from .layout import LayeredLayout, LayoutEngine
from .messages import build_message_graph
from .model import NodeGraph
from .policy import build_policy_graph
from .snapshot import CatalogSnapshot, load_snapshot
from .view import build_view_graph

logger = logging.getLogger(__name__)

GraphBuildFn = Callable[..., NodeGraph]

GRAPH_BUILDERS: dict[str, GraphBuildFn] = {
    "actors": build_actor_graph,
    "views": build_view_graph,
    "policies": build_policy_graph,
    "entities": build_entity_graph,
    "events": functools.partial(build_message_graph, collection=CollectionName.EVENTS),
    "commands": functools.partial(build_message_graph, collection=CollectionName.COMMANDS),
    "queries": functools.partial(build_message_graph, collection=CollectionName.QUERIES),
    "messages": build_message_graph,
}

_ALIASES = {
    "actor": "actors",
    "view": "views",
    "policy": "policies",
    "entity": "entities",
    "event": "events",
    "command": "commands",
    "query": "queries",
    "message": "messages",
}


def normalize_kind(kind: str) -> str:
    """Map singular/plural kind names onto GRAPH_BUILDERS keys.

    Raises:
        UnknownGraphKindError: If no builder exists for the kind
    """
    key = _ALIASES.get(kind.lower(), kind.lower())
    if key not in GRAPH_BUILDERS:
        raise UnknownGraphKindError(kind)
    return key


def build_graph(
    snapshot: CatalogSnapshot,
    kind: str,
    entity_id: str,
    version: Optional[str] = None,
    mode: str = "simple",
    layout: Optional[LayoutEngine] = None,
) -> NodeGraph:
    """Build the graph of one record from an already loaded snapshot."""
    builder = GRAPH_BUILDERS[normalize_kind(kind)]
    return builder(snapshot, entity_id, version, mode=mode, layout=layout)


class GraphService:
    """Builds graphs on demand from a content source.

    Attributes:
        source: Content source collections are loaded from
        layout: Layout engine applied to every graph
    """

    def __init__(
        self,
        source: ContentSource,
        settings: Optional[Settings] = None,
        layout: Optional[LayoutEngine] = None,
    ) -> None:
        self.source = source
        self.settings = settings or Settings()
        self.layout = layout or LayeredLayout.from_settings(self.settings)

    async def build(
        self,
        kind: str,
        entity_id: str,
        version: Optional[str] = None,
        mode: str = "simple",
        with_layout: bool = True,
    ) -> NodeGraph:
        normalize_kind(kind)
        snapshot = await load_snapshot(self.source)
        graph = build_graph(
            snapshot, kind, entity_id, version, mode=mode, layout=self.layout if with_layout else None
        )
        logger.info(
            "Graph built",
            extra={
                "kind": kind,
                "id": entity_id,
                "version": version,
                "nodes": len(graph.nodes),
                "edges": len(graph.edges),
            },
        )
        return graph
