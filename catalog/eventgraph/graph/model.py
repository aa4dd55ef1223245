"""
Graph output types.

The graph handed to the UI is a plain ``{nodes, edges}`` structure:
nodes ``{id, type, data, position}`` and edges ``{id, source, target,
label, data}``. Ids are deterministic so repeated builds of the same
catalog produce identical graphs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..model.types import Entity


def node_id(entity: Entity) -> str:
    return f"{entity.id}-{entity.version}"


def edge_id(source: str, target: str, suffix: str = "") -> str:
    return f"{source}-{target}{suffix}"


@dataclass
class GraphNode:
    id: str
    type: str
    data: dict[str, Any]
    position: dict[str, float] = field(default_factory=lambda: {"x": 0.0, "y": 0.0})

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, "data": self.data, "position": dict(self.position)}


@dataclass
class GraphEdge:
    id: str
    source: str
    target: str
    label: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "data": self.data,
        }


@dataclass
class NodeGraph:
    """Nodes and edges around one focal entity."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "NodeGraph":
        return cls()

    def node(self, node_key: str) -> GraphNode | None:
        return next((node for node in self.nodes if node.id == node_key), None)

    def edge(self, edge_key: str) -> GraphEdge | None:
        return next((edge for edge in self.edges if edge.id == edge_key), None)

    def edges_to(self, node_key: str) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.target == node_key]

    def edges_from(self, node_key: str) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.source == node_key]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
