"""
Entity enrichment pipeline.

Produces the "current view" of a collection: every record with its
version family, its relationship pointers resolved to concrete records
(alongside the untouched authored pointers), reverse lookups such as the
domains that list it, and the catalog paths pages link to.

Steps, per collection:
    1. Load the collection and every collection it points at, concurrently
    2. Build versioned maps
    3. Drop hidden records (and non-latest versions unless all_versions)
    4. Hydrate relationship fields, add versions and catalog paths
    5. Add reverse lookups
    6. Sort by display name

Invariants:
    - Hydrated lists are always lists, never None
    - "<field>Raw" holds the authored pointers unchanged
    - Results are memoized in an EnrichmentCache unless caching is disabled

How to change safely:
    - New relationship fields belong in model.types.RELATIONSHIPS
    - New reverse lookups belong in REVERSE_LOOKUPS
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from ..config import Settings
from ..content.base import ContentSource
from ..model.diagnostics import Diagnostics
from ..model.types import CollectionName, Entity, relationship_specs
from ..model.versioned_map import VersionedMap
from ..model.versions import satisfies
from ..resolve.hydrate import hydrate
from ..resolve.index import actors_reading_view
from .cache import EnrichmentCache, get_enrichment_cache
from .paths import FolderNameResolver, ProjectFolderResolver

logger = logging.getLogger(__name__)

C = CollectionName

# Collection -> catalog "type" used by pages
CATALOG_TYPES: dict[CollectionName, str] = {
    C.ACTORS: "actor",
    C.VIEWS: "view",
    C.POLICIES: "policy",
    C.ENTITIES: "entity",
    C.SERVICES: "service",
}

# Collection -> (enriched key, referencing collection, referencing field)
REVERSE_LOOKUPS: dict[CollectionName, tuple[tuple[str, CollectionName, str], ...]] = {
    C.VIEWS: (("domains", C.DOMAINS, "views"),),
    C.POLICIES: (("domains", C.DOMAINS, "policies"),),
    C.ENTITIES: (("domains", C.DOMAINS, "entities"), ("services", C.SERVICES, "entities")),
    C.SERVICES: (("domains", C.DOMAINS, "services"),),
}

# Non-relationship pointer fields hydrated for listings
EXTRA_FIELDS: dict[CollectionName, tuple[tuple[str, tuple[CollectionName, ...]], ...]] = {
    C.SERVICES: (("entities", (C.ENTITIES,)),),
}


@dataclass
class CatalogPaths:
    path: str
    file_path: str
    public_path: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return {
            "path": self.path,
            "filePath": self.file_path,
            "publicPath": self.public_path,
            "type": self.type,
        }


@dataclass
class EnrichedEntity:
    """A record with resolved relationships and catalog paths.

    Attributes:
        entity: The authored record
        data: Authored payload plus versions, latestVersion, hydrated
            relationship lists (Entity objects) and "<field>Raw" lists
        catalog: Paths the catalog pages use for this record
    """

    entity: Entity
    data: dict[str, Any]
    catalog: CatalogPaths

    @property
    def id(self) -> str:
        return self.entity.id

    @property
    def version(self) -> str:
        return self.entity.version

    def related(self, key: str) -> list[Entity]:
        return list(self.data.get(key) or [])

    def to_dict(self) -> dict[str, Any]:
        data = {}
        for key, value in self.data.items():
            if isinstance(value, list) and value and all(isinstance(item, Entity) for item in value):
                value = [_summary(item) for item in value]
            data[key] = value
        return {
            "id": self.entity.entry_id,
            "collection": self.entity.collection.value,
            "data": data,
            "catalog": self.catalog.to_dict(),
        }


def _summary(entity: Entity) -> dict[str, Any]:
    return {
        "id": entity.id,
        "version": entity.version,
        "name": entity.name,
        "collection": entity.collection.value,
    }


def _referenced_by(candidates: list[Entity], field_name: str, item: Entity, latest_version: str) -> list[Entity]:
    """Candidates whose <field_name> pointers name this exact record.

    A pointer without a version (or "latest") names only the latest
    version of the family.
    """
    found = []
    for candidate in candidates:
        for ref in candidate.refs(field_name):
            if ref.id == item.id and satisfies(item.version, ref.version, latest=latest_version):
                found.append(candidate)
                break
    return found


class EnrichmentPipeline:
    """Builds enriched collections from a content source.

    Example:
        >>> pipeline = EnrichmentPipeline(InMemoryContentSource({...}))
        >>> actors = await pipeline.get_actors()
        >>> actors[0].data["reads"]
    """

    def __init__(
        self,
        source: ContentSource,
        settings: Optional[Settings] = None,
        cache: Optional[EnrichmentCache] = None,
        folder_resolver: Optional[FolderNameResolver] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self.source = source
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else get_enrichment_cache()
        self.folder_resolver = folder_resolver or ProjectFolderResolver(self.settings.project_dir)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    async def get_actors(self, all_versions: bool = True) -> list[EnrichedEntity]:
        return await self.enrich(C.ACTORS, all_versions)

    async def get_views(self, all_versions: bool = True) -> list[EnrichedEntity]:
        return await self.enrich(C.VIEWS, all_versions)

    async def get_policies(self, all_versions: bool = True) -> list[EnrichedEntity]:
        return await self.enrich(C.POLICIES, all_versions)

    async def get_entities(self, all_versions: bool = True) -> list[EnrichedEntity]:
        return await self.enrich(C.ENTITIES, all_versions)

    async def get_services(self, all_versions: bool = True) -> list[EnrichedEntity]:
        return await self.enrich(C.SERVICES, all_versions)

    @property
    def caching(self) -> bool:
        return self.cache.enabled and not self.settings.disable_cache

    async def load(self, *names: CollectionName) -> dict[CollectionName, list[Entity]]:
        """Load several collections concurrently."""
        unique = list(dict.fromkeys(names))
        results = await asyncio.gather(*(self.source.get_collection(name) for name in unique))
        return dict(zip(unique, results))

    def _needed(self, collection: CollectionName) -> list[CollectionName]:
        needed = [collection]
        for spec in relationship_specs(collection):
            needed.extend(spec.targets)
        for _, targets in EXTRA_FIELDS.get(collection, ()):
            needed.extend(targets)
        for _, referencing, _ in REVERSE_LOOKUPS.get(collection, ()):
            needed.append(referencing)
        if collection == C.VIEWS:
            needed.append(C.ACTORS)
        return needed

    async def enrich(self, collection: CollectionName, all_versions: bool = True) -> list[EnrichedEntity]:
        """Enrich one collection.

        Args:
            collection: Collection to enrich
            all_versions: Keep every version (True) or only the latest of each family

        Returns:
            Enriched records sorted by display name
        """
        if self.caching:
            cached = self.cache.get(collection, all_versions)
            if cached is not None:
                return cached

        loaded = await self.load(*self._needed(collection))
        maps = {name: VersionedMap.from_entities(records) for name, records in loaded.items()}
        own_map = maps[collection]

        records = [record for record in loaded[collection] if not record.hidden]
        if not all_versions:
            records = [record for record in records if own_map.is_latest(record)]

        enriched = [self._enrich_record(record, own_map, maps, loaded) for record in records]
        enriched.sort(key=lambda item: item.entity.name.casefold())

        logger.debug(
            "Enriched collection",
            extra={"collection": collection.value, "all_versions": all_versions, "count": len(enriched)},
        )
        if self.caching:
            self.cache.put(collection, all_versions, enriched)
        return enriched

    def _enrich_record(
        self,
        record: Entity,
        own_map: VersionedMap,
        maps: dict[CollectionName, VersionedMap],
        loaded: dict[CollectionName, list[Entity]],
    ) -> EnrichedEntity:
        collection = record.collection
        latest_version = own_map.latest_version(record.id) or record.version

        data = dict(record.data)
        data["versions"] = own_map.versions(record.id)
        data["latestVersion"] = latest_version

        for spec in relationship_specs(collection):
            resolved, raw = hydrate(record, spec.field, (maps[t] for t in spec.targets), self.diagnostics)
            data[spec.field] = resolved
            data[f"{spec.field}Raw"] = raw

        for field_name, targets in EXTRA_FIELDS.get(collection, ()):
            resolved, raw = hydrate(record, field_name, (maps[t] for t in targets), self.diagnostics)
            data[field_name] = resolved
            data[f"{field_name}Raw"] = raw

        for key, referencing, field_name in REVERSE_LOOKUPS.get(collection, ()):
            data[key] = _referenced_by(loaded[referencing], field_name, record, latest_version)

        if collection == C.VIEWS:
            informed = {actor.key for actor in data.get("informs", [])}
            data["readByActors"] = [
                actor for actor in actors_reading_view(loaded[C.ACTORS], record) if actor.key not in informed
            ]

        return EnrichedEntity(entity=record, data=data, catalog=self._catalog_paths(record))

    def _catalog_paths(self, record: Entity) -> CatalogPaths:
        collection = record.collection.value
        entry = record.entry_id.replace("/index.mdx", "")
        folder = self.folder_resolver(record.id, record.version) or record.entry_id.replace(
            f"-{record.version}", ""
        )
        return CatalogPaths(
            path=os.path.join(collection, entry),
            file_path=os.path.join(self.settings.project_dir, "src", "catalog-files", collection, entry),
            public_path=os.path.join("/generated", collection, folder),
            type=CATALOG_TYPES.get(record.collection, collection),
        )


async def validate_catalog(source: ContentSource, settings: Optional[Settings] = None) -> Diagnostics:
    """Resolve every enriched collection and collect broken references.

    Runs with a private, disabled cache so every pointer is resolved.
    """
    diagnostics = Diagnostics()
    pipeline = EnrichmentPipeline(
        source,
        settings=settings,
        cache=EnrichmentCache(enabled=False),
        diagnostics=diagnostics,
    )
    for collection in CATALOG_TYPES:
        await pipeline.enrich(collection, all_versions=True)
    logger.info("Catalog validated", extra={"diagnostics": len(diagnostics)})
    return diagnostics
