"""
Accumulator for graph nodes and edges.

Every graph builder funnels its output through a GraphBuilder so node and
edge de-duplication happen in one place: the first node or edge with a
given id wins. A later edge with the same id but a different label is
recorded as a label_conflict diagnostic.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..model.diagnostics import Diagnostics
from ..model.types import Entity
from .labels import color_for, node_style
from .layout import LayoutEngine
from .model import GraphEdge, GraphNode, NodeGraph, edge_id, node_id

logger = logging.getLogger(__name__)

Endpoint = Union[Entity, str]


def _endpoint_id(endpoint: Endpoint) -> str:
    return endpoint if isinstance(endpoint, str) else node_id(endpoint)


def _root_summary(entity: Entity) -> dict[str, str]:
    return {"id": entity.id, "version": entity.version, "collection": entity.collection.value}


class GraphBuilder:
    """Collects nodes and edges for one graph.

    Attributes:
        mode: Rendering mode ("simple" or "full"), copied into node data
        diagnostics: Collector for label conflicts
    """

    def __init__(self, mode: str = "simple", diagnostics: Optional[Diagnostics] = None) -> None:
        self.mode = mode
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._nodes: dict[str, GraphNode] = {}
        self._edges: dict[str, GraphEdge] = {}

    def add_node(self, entity: Entity, node_key: Optional[str] = None) -> str:
        """Add a node for a record; returns its node id."""
        key = node_key or node_id(entity)
        if key not in self._nodes:
            node_type, data_key = node_style(entity.collection)
            self._nodes[key] = GraphNode(
                id=key,
                type=node_type,
                data={"mode": self.mode, data_key: dict(entity.data)},
            )
        return key

    def add_edge(
        self,
        source: Endpoint,
        target: Endpoint,
        label: str,
        suffix: str = "",
        color_key: Optional[str] = None,
        root: Optional[tuple[Entity, Entity]] = None,
    ) -> str:
        """Add an edge between two node ids (or records); returns its edge id.

        Args:
            source: Source record or node id
            target: Target record or node id
            label: Edge label
            suffix: Appended to the deterministic edge id
            color_key: String the edge color derives from (default: source id)
            root: (source, target) records the edge ultimately connects,
                stored as rootSourceAndTarget for full edge data
        """
        source_key, target_key = _endpoint_id(source), _endpoint_id(target)
        key = edge_id(source_key, target_key, suffix)
        existing = self._edges.get(key)
        if existing is not None:
            if existing.label != label:
                self.diagnostics.label_conflict(key, existing.label, label)
            return key

        data = {"customColor": color_for(color_key or source_key)}
        if root is not None:
            data["rootSourceAndTarget"] = {
                "source": _root_summary(root[0]),
                "target": _root_summary(root[1]),
            }
        self._edges[key] = GraphEdge(id=key, source=source_key, target=target_key, label=label, data=data)
        return key

    def build(self, layout: Optional[LayoutEngine] = None) -> NodeGraph:
        graph = NodeGraph(nodes=list(self._nodes.values()), edges=list(self._edges.values()))
        if layout is not None:
            layout.layout(graph.nodes, graph.edges)
        logger.debug("Built graph with %d nodes and %d edges", len(graph.nodes), len(graph.edges))
        return graph
