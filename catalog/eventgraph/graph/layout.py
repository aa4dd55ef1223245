"""
Graph layout.

LayeredLayout ranks nodes left to right by longest path from the sources
of the graph (cycles are collapsed with networkx condensation first) and
stacks nodes of one rank vertically, centred on y=0. Positions are the
top-left corner of each node box.

Invariants:
    - Layout is deterministic for a given node and edge order
    - Every node receives a position, including isolated ones
"""

from __future__ import annotations

from abc import abstractmethod
from collections import defaultdict
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import networkx as nx

from .model import GraphEdge, GraphNode

if TYPE_CHECKING:
    from ..config import Settings

NODE_WIDTH = 150
NODE_HEIGHT = 100
RANK_SEP = 300
NODE_SEP = 50


@runtime_checkable
class LayoutEngine(Protocol):
    """Assigns positions to graph nodes in place."""

    @abstractmethod
    def layout(self, nodes: list[GraphNode], edges: list[GraphEdge]) -> None:
        ...


class LayeredLayout:
    """Left-to-right layered layout."""

    def __init__(
        self,
        node_width: int = NODE_WIDTH,
        node_height: int = NODE_HEIGHT,
        rank_sep: int = RANK_SEP,
        node_sep: int = NODE_SEP,
    ) -> None:
        self.node_width = node_width
        self.node_height = node_height
        self.rank_sep = rank_sep
        self.node_sep = node_sep

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LayeredLayout":
        return cls(settings.node_width, settings.node_height, settings.rank_sep, settings.node_sep)

    def ranks(self, nodes: list[GraphNode], edges: list[GraphEdge]) -> dict[str, int]:
        """Longest-path rank of every node."""
        graph = nx.DiGraph()
        graph.add_nodes_from(node.id for node in nodes)
        graph.add_edges_from(
            (edge.source, edge.target)
            for edge in edges
            if edge.source != edge.target and edge.source in graph and edge.target in graph
        )
        condensed = nx.condensation(graph)
        component_rank: dict[int, int] = {}
        for component in nx.topological_sort(condensed):
            component_rank[component] = max(
                (component_rank[parent] + 1 for parent in condensed.predecessors(component)),
                default=0,
            )
        mapping = condensed.graph["mapping"]
        return {node.id: component_rank[mapping[node.id]] for node in nodes}

    def layout(self, nodes: list[GraphNode], edges: list[GraphEdge]) -> None:
        if not nodes:
            return
        ranks = self.ranks(nodes, edges)
        layers: dict[int, list[GraphNode]] = defaultdict(list)
        for node in nodes:
            layers[ranks[node.id]].append(node)

        row = self.node_height + self.node_sep
        for rank, layer in layers.items():
            offset = (len(layer) - 1) * row / 2
            for index, node in enumerate(layer):
                node.position = {
                    "x": float(rank * (self.node_width + self.rank_sep)),
                    "y": float(index * row - offset),
                }
