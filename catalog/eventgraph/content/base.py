"""
Content source abstraction.

A content source hands out the authored records of one collection at a
time. The engine never reads files itself; everything it resolves comes
through this protocol, so tests use the in-memory source and deployments
point the directory source at a catalog checkout.

Invariants:
    - get_collection() returns every record of the collection, hidden ones included
    - Unknown collection names raise UnknownCollectionError
    - Returned lists may be shared; callers must not mutate records

How to change safely:
    - New sources must implement the ContentSource protocol
    - Keep get_collection() async even when the backing store is not
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..model.types import CollectionName, Entity

if TYPE_CHECKING:
    from ..config import Settings


@runtime_checkable
class ContentSource(Protocol):
    """Protocol for collection loaders."""

    @abstractmethod
    async def get_collection(self, name: CollectionName | str) -> list[Entity]:
        """Load every record of a collection.

        Args:
            name: Collection name

        Returns:
            Records of the collection (possibly empty)

        Raises:
            UnknownCollectionError: If name is not a catalog collection
            ContentLoadError: If backing content cannot be parsed
        """
        ...


def create_content_source(settings: "Settings") -> ContentSource:
    """Factory function to create a content source from configuration.

    Args:
        settings: eventgraph settings

    Returns:
        A DirectoryContentSource rooted at settings.content_dir
    """
    from .filesystem import DirectoryContentSource

    return DirectoryContentSource(settings.content_dir)
