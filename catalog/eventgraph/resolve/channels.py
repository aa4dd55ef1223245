"""
Channel chain resolution.

Channels may route to other channels (``routes`` pointers). When a
producer publishes to channel A and a consumer reads from channel C, the
graph shows the hop sequence A -> B -> C if such a route exists. The
route graph is a networkx DiGraph built once per set of channels; paths
are shortest paths, so cyclic routes terminate.

Invariants:
    - Same producer and consumer channel yields a one-element chain
    - No route yields an empty chain, never an exception
    - Unresolvable route pointers are ignored
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import networkx as nx

from ..model.types import Entity
from ..model.versioned_map import VersionedMap, find_in_map

logger = logging.getLogger(__name__)


def channel_key(channel: Entity) -> str:
    return f"{channel.id}-{channel.version}"


class ChannelGraph:
    """Directed route graph over a set of channels."""

    def __init__(self, graph: nx.DiGraph) -> None:
        self._graph = graph

    @classmethod
    def from_channels(cls, channels: Iterable[Entity]) -> "ChannelGraph":
        channels = list(channels)
        vmap = VersionedMap.from_entities(channels)
        graph = nx.DiGraph()
        for channel in channels:
            graph.add_node(channel_key(channel), channel=channel)
        for channel in channels:
            for ref in channel.refs("routes"):
                target = find_in_map(vmap, ref.id, ref.version)
                if target is None:
                    logger.debug("Channel %s routes to unknown channel %s", channel.id, ref.id)
                    continue
                graph.add_edge(channel_key(channel), channel_key(target))
        return cls(graph)

    def get_channel_chain(self, producer: Entity, consumer: Entity) -> list[Entity]:
        """Ordered channels from producer channel to consumer channel.

        Returns:
            [producer] if both are the same channel, the hop sequence if
            a route exists, otherwise [].
        """
        source, target = channel_key(producer), channel_key(consumer)
        if source == target:
            return [producer]
        try:
            path = nx.shortest_path(self._graph, source, target)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return []
        return [self._graph.nodes[key]["channel"] for key in path]

    def is_connected(self, source: Entity, target: Entity) -> bool:
        """Direct route from source to target."""
        return self._graph.has_edge(channel_key(source), channel_key(target))


def get_channel_chain(producer: Entity, consumer: Entity, all_channels: Iterable[Entity]) -> list[Entity]:
    return ChannelGraph.from_channels(all_channels).get_channel_chain(producer, consumer)


def is_channels_connected(source: Entity, target: Entity, all_channels: Optional[Iterable[Entity]] = None) -> bool:
    """Whether source routes directly to target."""
    channels = list(all_channels) if all_channels is not None else [source, target]
    return ChannelGraph.from_channels(channels).is_connected(source, target)
