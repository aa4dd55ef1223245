"""
Core record types for the catalog.

An Entity is one authored, versioned record of a collection. References
are the pointers records hold to each other. Relationship specs describe,
per collection, which fields hold references, what they point at and in
which direction, so resolution code can iterate specs instead of
branching on collection names.

Invariants:
    - Entity.data always carries "id" and "version" (version as a string)
    - Reference.version of None or "latest" means the latest of the family
    - Raw reference payloads are never mutated

How to change safely:
    - New relationship fields go into RELATIONSHIPS, not into callers
    - Keep CollectionName values identical to authored folder names
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import UnknownCollectionError

logger = logging.getLogger(__name__)


class CollectionName(str, Enum):
    """Collections known to the catalog."""

    EVENTS = "events"
    COMMANDS = "commands"
    QUERIES = "queries"
    SERVICES = "services"
    DOMAINS = "domains"
    FLOWS = "flows"
    CHANNELS = "channels"
    ENTITIES = "entities"
    POLICIES = "policies"
    VIEWS = "views"
    ACTORS = "actors"
    CONTAINERS = "containers"
    DIAGRAMS = "diagrams"
    TEAMS = "teams"
    USERS = "users"
    DATA_PRODUCTS = "data-products"


MESSAGE_COLLECTIONS: tuple[CollectionName, ...] = (
    CollectionName.EVENTS,
    CollectionName.COMMANDS,
    CollectionName.QUERIES,
)


def _coerce_version(value: Any) -> Any:
    # YAML reads 1.0 and 2 as numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Reference(BaseModel):
    """A pointer from one record to another.

    Attributes:
        id: Target record id
        version: Exact version or range; None/"latest" means latest
        to: Channels a sent message is published to
        from_: Channels a received message is consumed from (alias "from")
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    version: Optional[str] = None
    to: Optional[list["Reference"]] = None
    from_: Optional[list["Reference"]] = Field(default=None, alias="from")

    @field_validator("version", mode="before")
    @classmethod
    def _version_to_str(cls, value: Any) -> Any:
        return _coerce_version(value)

    @property
    def wants_latest(self) -> bool:
        return self.version is None or self.version == "latest"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Entity(BaseModel):
    """A single versioned record of a collection.

    Attributes:
        entry_id: Content entry id (defaults to "{id}-{version}")
        collection: Collection the record belongs to
        data: Authored payload, always holding "id" and "version"
        file_path: Source file the record was loaded from, if any
    """

    model_config = ConfigDict(populate_by_name=True)

    entry_id: str = Field(default="", alias="entryId")
    collection: CollectionName
    data: dict[str, Any]
    file_path: Optional[str] = Field(default=None, alias="filePath")

    @model_validator(mode="after")
    def _normalize(self) -> "Entity":
        if "id" not in self.data:
            raise ValueError("entity data must define an id")
        self.data["version"] = str(_coerce_version(self.data.get("version", "0.0.0")))
        if not self.entry_id:
            self.entry_id = f"{self.data['id']}-{self.data['version']}"
        return self

    @property
    def id(self) -> str:
        return self.data["id"]

    @property
    def version(self) -> str:
        return self.data["version"]

    @property
    def name(self) -> str:
        return self.data.get("name") or self.data["id"]

    @property
    def hidden(self) -> bool:
        return bool(self.data.get("hidden", False))

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used for self-filtering: (id, version, collection)."""
        return (self.id, self.version, self.collection.value)

    def raw_refs(self, field: str) -> list[dict[str, Any]]:
        """Authored pointer payloads of a field, always a list."""
        value = self.data.get(field) or []
        return [item for item in value if isinstance(item, dict)]

    def refs(self, field: str) -> list[Reference]:
        """Parsed references of a field. Malformed entries are skipped."""
        parsed = []
        for item in self.raw_refs(field):
            if not item.get("id"):
                logger.warning(
                    "Skipping reference without id",
                    extra={"entity": self.entry_id, "field": field},
                )
                continue
            parsed.append(Reference.model_validate(item))
        return parsed

    def same_as(self, other: Optional["Entity"]) -> bool:
        return other is not None and self.key == other.key


class RelationshipKind(str, Enum):
    """What a relationship field means for the record that holds it."""

    PRODUCES = "produces"
    CONSUMES = "consumes"
    TRIGGERED_BY = "triggered_by"
    DISPATCHES = "dispatches"
    SUBSCRIBES = "subscribes"
    INFORMS = "informs"
    READS = "reads"
    ISSUES = "issues"


@dataclass(frozen=True)
class RelationshipSpec:
    """One reference-holding field of a collection."""

    field: str
    kind: RelationshipKind
    targets: tuple[CollectionName, ...]


RELATIONSHIPS: dict[CollectionName, tuple[RelationshipSpec, ...]] = {
    CollectionName.SERVICES: (
        RelationshipSpec("sends", RelationshipKind.PRODUCES, MESSAGE_COLLECTIONS),
        RelationshipSpec("receives", RelationshipKind.CONSUMES, MESSAGE_COLLECTIONS),
    ),
    CollectionName.ENTITIES: (
        RelationshipSpec("sends", RelationshipKind.PRODUCES, MESSAGE_COLLECTIONS),
        RelationshipSpec("receives", RelationshipKind.CONSUMES, MESSAGE_COLLECTIONS),
    ),
    CollectionName.POLICIES: (
        RelationshipSpec("receives", RelationshipKind.TRIGGERED_BY, (CollectionName.EVENTS,)),
        RelationshipSpec("sends", RelationshipKind.DISPATCHES, (CollectionName.COMMANDS,)),
    ),
    CollectionName.VIEWS: (
        RelationshipSpec("subscribes", RelationshipKind.SUBSCRIBES, (CollectionName.EVENTS,)),
        RelationshipSpec("informs", RelationshipKind.INFORMS, (CollectionName.ACTORS,)),
    ),
    CollectionName.ACTORS: (
        RelationshipSpec("reads", RelationshipKind.READS, (CollectionName.VIEWS,)),
        RelationshipSpec("issues", RelationshipKind.ISSUES, (CollectionName.COMMANDS,)),
    ),
}


def relationship_specs(collection: CollectionName) -> tuple[RelationshipSpec, ...]:
    return RELATIONSHIPS.get(collection, ())


def relationship_spec(collection: CollectionName, kind: RelationshipKind) -> RelationshipSpec:
    for spec in relationship_specs(collection):
        if spec.kind == kind:
            return spec
    raise KeyError(f"{collection.value} has no {kind.value} relationship")


def iter_relationships(entity: Entity) -> Iterator[tuple[RelationshipSpec, Reference]]:
    """Yield every (spec, reference) pair an entity declares."""
    for spec in relationship_specs(entity.collection):
        for ref in entity.refs(spec.field):
            yield spec, ref


def to_collection(name: str | CollectionName) -> CollectionName:
    """Parse a collection name.

    Raises:
        UnknownCollectionError: If the name is not a catalog collection
    """
    if isinstance(name, CollectionName):
        return name
    try:
        return CollectionName(name)
    except ValueError:
        raise UnknownCollectionError(name) from None
