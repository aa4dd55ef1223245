"""
Per-entity graph builders.

Each builder takes a CatalogSnapshot and a focal (id, version) and returns
a NodeGraph: the focal record, its direct relationships and one further
hop, de-duplicated and optionally laid out.

Invariants:
    - A missing focal record yields an empty graph
    - The focal record appears exactly once
    - Node ids are "<id>-<version>"; edge ids are "<source>-<target>[suffix]"
"""

from .actor import build_actor_graph
from .builder import GraphBuilder
from .entity import build_entity_graph
from .layout import LayeredLayout, LayoutEngine
from .messages import build_message_graph
from .model import GraphEdge, GraphNode, NodeGraph, edge_id, node_id
from .policy import build_policy_graph
from .service import GRAPH_BUILDERS, GraphService, build_graph, normalize_kind
from .snapshot import CatalogSnapshot, load_snapshot
from .view import build_view_graph

__all__ = [
    "GRAPH_BUILDERS",
    "CatalogSnapshot",
    "GraphBuilder",
    "GraphEdge",
    "GraphNode",
    "GraphService",
    "LayeredLayout",
    "LayoutEngine",
    "NodeGraph",
    "build_actor_graph",
    "build_entity_graph",
    "build_graph",
    "build_message_graph",
    "build_policy_graph",
    "build_view_graph",
    "edge_id",
    "load_snapshot",
    "node_id",
    "normalize_kind",
]
