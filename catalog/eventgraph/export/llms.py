"""
Plain-text export of the catalog for language models (llms.txt).

One markdown section per collection, each record a link to its page.
Entities, policies and views are grouped under the domains that list
them; actors, teams and users are flat lists.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Optional

from ..config import Settings
from ..content.base import ContentSource
from ..model.types import CollectionName, Entity
from ..model.versioned_map import VersionedMap, find_in_map

logger = logging.getLogger(__name__)

C = CollectionName

VERSIONED_SECTIONS: tuple[tuple[str, CollectionName], ...] = (
    ("Events", C.EVENTS),
    ("Commands", C.COMMANDS),
    ("Queries", C.QUERIES),
    ("Services", C.SERVICES),
    ("Domains", C.DOMAINS),
    ("Flows", C.FLOWS),
    ("Channels", C.CHANNELS),
    ("Containers (Databases, External Systems)", C.CONTAINERS),
)

DOMAIN_GROUPED_SECTIONS: tuple[tuple[str, CollectionName], ...] = (
    ("Entities", C.ENTITIES),
    ("Policies", C.POLICIES),
    ("Views", C.VIEWS),
)

EXPORT_COLLECTIONS = tuple(
    dict.fromkeys(
        [c for _, c in VERSIONED_SECTIONS] + [c for _, c in DOMAIN_GROUPED_SECTIONS] + [C.ACTORS, C.TEAMS, C.USERS]
    )
)


def _page_url(base_url: str, collection: CollectionName, item: Entity) -> str:
    return f"{base_url}/docs/{collection.value}/{item.id}/{item.version}.mdx"


def format_versioned_item(item: Entity, base_url: str, extra: Optional[str] = None) -> str:
    title = f"{item.name} - {item.id} - {item.version}"
    if extra:
        title = f"{title} - {extra}"
    line = f"- [{title}]({_page_url(base_url, item.collection, item)})"
    summary = item.data.get("summary")
    return f"{line} - {summary}" if summary else line


def format_simple_item(item: Entity, base_url: str) -> str:
    return f"- [{item.id}]({base_url}/docs/{item.collection.value}/{item.id}.mdx) - {item.name}"


def _channel_extra(channel: Entity) -> Optional[str]:
    protocols = channel.data.get("protocols") or []
    return "&".join(f"protocol - {protocol}" for protocol in protocols) or None


def render_domain_grouped(
    domains: Iterable[Entity], items: list[Entity], collection: CollectionName, base_url: str
) -> str:
    """Items listed under each domain that references them."""
    vmap = VersionedMap.from_entities(items)
    blocks = []
    for domain in domains:
        refs = domain.refs(collection.value)
        if not refs:
            continue
        lines = [f"- {domain.name} Domain"]
        for ref in refs:
            item = find_in_map(vmap, ref.id, ref.version)
            if item is None:
                continue
            line = f"    - [{item.name}]({_page_url(base_url, collection, item)})"
            summary = item.data.get("summary")
            lines.append(f"{line} - {summary}" if summary else line)
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


def render_llms_txt(
    collections: Mapping[CollectionName, list[Entity]],
    base_url: str = "",
    organization_name: str = "EventCatalog",
    tagline: str = "",
) -> str:
    """Render the llms.txt document.

    Args:
        collections: Loaded collections (missing ones render as empty sections)
        base_url: Prefix of every link, without a trailing slash
        organization_name: Used in the document title
        tagline: Quoted under the title

    Returns:
        The document text
    """
    base_url = base_url.rstrip("/")

    def visible(collection: CollectionName) -> list[Entity]:
        return [item for item in collections.get(collection, []) if not item.hidden]

    parts = [f"# {organization_name} EventCatalog Documentation\n", f"> {tagline}\n"]

    for title, collection in VERSIONED_SECTIONS:
        parts.append(f"\n## {title}")
        for item in visible(collection):
            extra = _channel_extra(item) if collection == C.CHANNELS else None
            parts.append(format_versioned_item(item, base_url, extra))

    domains = visible(C.DOMAINS)
    for title, collection in DOMAIN_GROUPED_SECTIONS:
        parts.append(f"\n## {title}")
        grouped = render_domain_grouped(domains, visible(collection), collection, base_url)
        if grouped:
            parts.append(grouped)

    parts.append("\n## Actors")
    for actor in visible(C.ACTORS):
        line = f"- [{actor.name}]({_page_url(base_url, C.ACTORS, actor)})"
        summary = actor.data.get("summary")
        parts.append(f"{line} - {summary}" if summary else line)

    for title, collection in (("Teams", C.TEAMS), ("Users", C.USERS)):
        parts.append(f"\n## {title}")
        parts.extend(format_simple_item(item, base_url) for item in visible(collection))

    return "\n".join(parts) + "\n"


async def build_llms_txt(source: ContentSource, settings: Settings) -> str:
    """Load every exported collection and render llms.txt."""
    results = await asyncio.gather(*(source.get_collection(name) for name in EXPORT_COLLECTIONS))
    collections = dict(zip(EXPORT_COLLECTIONS, results))
    logger.debug("Rendering llms.txt", extra={"records": sum(len(r) for r in results)})
    return render_llms_txt(
        collections,
        base_url=settings.public_base_url,
        organization_name=settings.organization_name,
        tagline=settings.tagline,
    )
