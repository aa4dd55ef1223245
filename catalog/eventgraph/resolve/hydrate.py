"""
Reference hydration: turn authored pointers into concrete records.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ..model.diagnostics import Diagnostics
from ..model.types import Entity, Reference
from ..model.versioned_map import VersionedMap, find_in_map


def resolve_ref(ref: Reference, *maps: VersionedMap) -> Optional[Entity]:
    """Resolve a pointer against the first map that knows its target."""
    for vmap in maps:
        found = find_in_map(vmap, ref.id, ref.version)
        if found is not None:
            return found
    return None


def hydrate(
    entity: Entity,
    field: str,
    maps: Iterable[VersionedMap],
    diagnostics: Optional[Diagnostics] = None,
) -> tuple[list[Entity], list[dict[str, Any]]]:
    """Hydrate one relationship field of a record.

    Args:
        entity: Record holding the pointers
        field: Relationship field name (e.g. "sends")
        maps: Versioned maps of every collection the field may point at
        diagnostics: Collector for pointers that do not resolve

    Returns:
        (resolved, raw): resolved records in authored order with broken
        pointers dropped, and the untouched authored pointer payloads.
    """
    maps = tuple(maps)
    resolved = []
    for ref in entity.refs(field):
        found = resolve_ref(ref, *maps)
        if found is None:
            if diagnostics is not None:
                diagnostics.broken_reference(entity.entry_id, field, ref.id, ref.version)
            continue
        resolved.append(found)
    return resolved, [dict(item) for item in entity.raw_refs(field)]
