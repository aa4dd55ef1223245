"""
In-memory content source for tests and embedding.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Mapping

from ..model.types import CollectionName, Entity, to_collection

logger = logging.getLogger(__name__)


class InMemoryContentSource:
    """Content source backed by a dict of collection -> records.

    Records may be given as Entity objects or as plain dicts shaped like
    ``{"id": ..., "collection": ..., "data": {...}}``.

    Example:
        >>> source = InMemoryContentSource({
        ...     "events": [{"collection": "events", "data": {"id": "OrderCreated", "version": "1.0.0"}}],
        ... })
        >>> await source.get_collection("events")
    """

    def __init__(self, collections: Mapping[str, Iterable[Entity | Mapping[str, Any]]] | None = None) -> None:
        self._collections: dict[CollectionName, list[Entity]] = defaultdict(list)
        self.load_count = 0
        for name, records in (collections or {}).items():
            collection = to_collection(name)
            for record in records:
                self.add(collection, record)

    def add(self, collection: CollectionName | str, record: Entity | Mapping[str, Any]) -> Entity:
        """Add a record, returning the stored Entity."""
        collection = to_collection(collection)
        if not isinstance(record, Entity):
            payload = dict(record)
            payload.setdefault("collection", collection.value)
            record = Entity.model_validate(payload)
        self._collections[collection].append(record)
        return record

    async def get_collection(self, name: CollectionName | str) -> list[Entity]:
        collection = to_collection(name)
        self.load_count += 1
        return list(self._collections.get(collection, ()))
