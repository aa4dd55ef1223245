"""
Catalog record model: entities, references, versions and diagnostics.
"""

from .diagnostics import Diagnostic, Diagnostics
from .types import (
    MESSAGE_COLLECTIONS,
    RELATIONSHIPS,
    CollectionName,
    Entity,
    Reference,
    RelationshipKind,
    RelationshipSpec,
    iter_relationships,
    relationship_spec,
    relationship_specs,
    to_collection,
)
from .versioned_map import VersionedMap, find_in_map
from .versions import coerce_version, compare_versions, latest_of, satisfies, sort_latest_first

__all__ = [
    "MESSAGE_COLLECTIONS",
    "RELATIONSHIPS",
    "CollectionName",
    "Diagnostic",
    "Diagnostics",
    "Entity",
    "Reference",
    "RelationshipKind",
    "RelationshipSpec",
    "VersionedMap",
    "coerce_version",
    "compare_versions",
    "find_in_map",
    "iter_relationships",
    "latest_of",
    "relationship_spec",
    "relationship_specs",
    "satisfies",
    "sort_latest_first",
    "to_collection",
]
