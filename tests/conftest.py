"""
Shared pytest fixtures.
"""

import pytest

from catalog.eventgraph.enrich.cache import reset_enrichment_cache


@pytest.fixture(autouse=True)
def fresh_enrichment_cache():
    """Every test starts with an empty process-wide enrichment cache."""
    reset_enrichment_cache()
    yield
    reset_enrichment_cache()
