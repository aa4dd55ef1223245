"""
Entity enrichment: resolved, memoized views of catalog collections.
"""

from .cache import EnrichmentCache, get_enrichment_cache, reset_enrichment_cache
from .paths import FolderNameResolver, ProjectFolderResolver, null_folder_resolver
from .pipeline import CATALOG_TYPES, CatalogPaths, EnrichedEntity, EnrichmentPipeline, validate_catalog

__all__ = [
    "CATALOG_TYPES",
    "CatalogPaths",
    "EnrichedEntity",
    "EnrichmentCache",
    "EnrichmentPipeline",
    "FolderNameResolver",
    "ProjectFolderResolver",
    "get_enrichment_cache",
    "null_folder_resolver",
    "reset_enrichment_cache",
    "validate_catalog",
]
