"""
Versioned maps: records grouped by id, newest first.

Families are sorted once at construction, so lookups never re-sort and
"latest" is always the first member of a family.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Iterator, Optional

from .types import Entity
from .versions import LATEST, satisfies, sort_latest_first


class VersionedMap:
    """Mapping of record id to its version family (latest first)."""

    def __init__(self, families: dict[str, list[Entity]]) -> None:
        self._families = families

    @classmethod
    def from_entities(cls, entities: Iterable[Entity]) -> "VersionedMap":
        grouped: dict[str, list[Entity]] = defaultdict(list)
        for entity in entities:
            grouped[entity.id].append(entity)
        return cls({key: sort_latest_first(family) for key, family in grouped.items()})

    def family(self, entity_id: str) -> list[Entity]:
        return list(self._families.get(entity_id, ()))

    def latest(self, entity_id: str) -> Optional[Entity]:
        family = self._families.get(entity_id)
        return family[0] if family else None

    def latest_version(self, entity_id: str) -> Optional[str]:
        latest = self.latest(entity_id)
        return latest.version if latest else None

    def is_latest(self, entity: Entity) -> bool:
        return self.latest_version(entity.id) == entity.version

    def versions(self, entity_id: str) -> list[str]:
        return [entity.version for entity in self._families.get(entity_id, ())]

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._families

    def __iter__(self) -> Iterator[str]:
        return iter(self._families)

    def __len__(self) -> int:
        return len(self._families)


def find_in_map(vmap: VersionedMap, entity_id: str, version: Optional[str] = None) -> Optional[Entity]:
    """Resolve a pointer against a versioned map.

    Args:
        vmap: Map to search
        entity_id: Target id
        version: None/"latest" for the newest, else exact version or range

    Returns:
        The matching record or None.
    """
    family = vmap.family(entity_id)
    if not family:
        return None
    if version is None or version == LATEST:
        return family[0]
    for candidate in family:
        if candidate.version == version or satisfies(candidate.version, version):
            return candidate
    return None
