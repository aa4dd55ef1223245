"""
Memoization of enriched collections.

Enrichment touches several collections and resolves every pointer, so
results are kept per (collection, all_versions) key for the life of the
process. The cache is an explicit object: servers share the global one,
tests build their own or reset the global one.

Invariants:
    - Empty results are never stored
    - A disabled cache neither serves nor stores entries
    - invalidate() drops every entry, enable state is unchanged
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from ..model.types import CollectionName

if TYPE_CHECKING:
    from .pipeline import EnrichedEntity

logger = logging.getLogger(__name__)

CacheKey = Tuple[CollectionName, bool]

_global_cache: Optional[EnrichmentCache] = None
_cache_lock = threading.Lock()


class EnrichmentCache:
    """Process-lifetime store of enriched collections."""

    def __init__(self, enabled: bool = True) -> None:
        self._entries: Dict[CacheKey, list[EnrichedEntity]] = {}
        self._enabled = enabled
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def disable(self) -> None:
        """Stop serving and storing entries (existing entries are dropped)."""
        with self._lock:
            self._enabled = False
            self._entries.clear()

    def get(self, collection: CollectionName, all_versions: bool) -> Optional[list[EnrichedEntity]]:
        if not self._enabled:
            return None
        with self._lock:
            entry = self._entries.get((collection, all_versions))
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        return entry

    def put(self, collection: CollectionName, all_versions: bool, value: list[EnrichedEntity]) -> None:
        if not self._enabled or not value:
            return
        with self._lock:
            self._entries[(collection, all_versions)] = value

    def invalidate(self, collection: Optional[CollectionName] = None) -> None:
        """Drop cached entries for one collection, or for all of them."""
        with self._lock:
            if collection is None:
                self._entries.clear()
            else:
                for key in [key for key in self._entries if key[0] == collection]:
                    del self._entries[key]
        logger.debug("Enrichment cache invalidated: %s", collection.value if collection else "all")

    def __len__(self) -> int:
        return len(self._entries)


def get_enrichment_cache() -> EnrichmentCache:
    """Get the process-wide enrichment cache, creating it on first use."""
    global _global_cache
    with _cache_lock:
        if _global_cache is None:
            _global_cache = EnrichmentCache()
        return _global_cache


def reset_enrichment_cache() -> None:
    """Reset the process-wide cache (for testing)."""
    global _global_cache
    with _cache_lock:
        _global_cache = None
