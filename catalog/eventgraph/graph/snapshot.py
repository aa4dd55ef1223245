"""
Catalog snapshot: every collection a graph build needs, loaded once.

Graph builders are synchronous and pure; the snapshot is the only thing
they read. Versioned maps and the channel route graph are derived lazily
and memoized on the snapshot, so they are computed at most once per
build.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, Optional

from ..content.base import ContentSource
from ..model.types import MESSAGE_COLLECTIONS, CollectionName, Entity, to_collection
from ..model.versioned_map import VersionedMap, find_in_map
from ..resolve.channels import ChannelGraph

logger = logging.getLogger(__name__)

C = CollectionName

GRAPH_COLLECTIONS: tuple[CollectionName, ...] = (
    C.EVENTS,
    C.COMMANDS,
    C.QUERIES,
    C.SERVICES,
    C.ENTITIES,
    C.POLICIES,
    C.VIEWS,
    C.ACTORS,
    C.CHANNELS,
)


@dataclass
class CatalogSnapshot:
    """Loaded collections keyed by name."""

    collections: dict[CollectionName, list[Entity]] = field(default_factory=dict)
    _maps: dict[CollectionName, VersionedMap] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_entities(cls, entities: Iterable[Entity]) -> "CatalogSnapshot":
        collections: dict[CollectionName, list[Entity]] = {}
        for entity in entities:
            collections.setdefault(entity.collection, []).append(entity)
        return cls(collections)

    def get(self, collection: CollectionName | str) -> list[Entity]:
        return self.collections.get(to_collection(collection), [])

    @property
    def services(self) -> list[Entity]:
        return self.get(C.SERVICES)

    @property
    def entities(self) -> list[Entity]:
        return self.get(C.ENTITIES)

    @property
    def policies(self) -> list[Entity]:
        return self.get(C.POLICIES)

    @property
    def views(self) -> list[Entity]:
        return self.get(C.VIEWS)

    @property
    def actors(self) -> list[Entity]:
        return self.get(C.ACTORS)

    @property
    def channels(self) -> list[Entity]:
        return self.get(C.CHANNELS)

    @cached_property
    def latest_services(self) -> list[Entity]:
        services = self.map(C.SERVICES)
        return [service for service in self.services if services.is_latest(service)]

    def map(self, collection: CollectionName | str) -> VersionedMap:
        collection = to_collection(collection)
        if collection not in self._maps:
            self._maps[collection] = VersionedMap.from_entities(self.get(collection))
        return self._maps[collection]

    @cached_property
    def channel_graph(self) -> ChannelGraph:
        return ChannelGraph.from_channels(self.channels)

    def find(self, collection: CollectionName | str, entity_id: str, version: Optional[str] = None) -> Optional[Entity]:
        return find_in_map(self.map(collection), entity_id, version)

    def find_message(self, entity_id: str, version: Optional[str] = None) -> Optional[Entity]:
        """Resolve a pointer against events, commands and queries in turn."""
        for collection in MESSAGE_COLLECTIONS:
            found = self.find(collection, entity_id, version)
            if found is not None:
                return found
        return None

    def find_channel(self, entity_id: str, version: Optional[str] = None) -> Optional[Entity]:
        return self.find(C.CHANNELS, entity_id, version)


async def load_snapshot(
    source: ContentSource, collections: Iterable[CollectionName] = GRAPH_COLLECTIONS
) -> CatalogSnapshot:
    """Load collections concurrently into a snapshot."""
    names = list(dict.fromkeys(collections))
    results = await asyncio.gather(*(source.get_collection(name) for name in names))
    logger.debug("Loaded snapshot", extra={"collections": [name.value for name in names]})
    return CatalogSnapshot(dict(zip(names, results)))
