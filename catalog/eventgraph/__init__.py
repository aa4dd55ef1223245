"""
eventgraph - relationship and graph engine for event-driven architecture catalogs.

Authors describe services, messages (events, commands, queries), policies,
views, actors, entities, channels and domains as versioned records that
point at each other. This package turns those records into:
- Enriched collections with every pointer resolved to a concrete version
- Focused node/edge graphs around a single entity, ready for layout
- A machine-readable text export of the whole catalog

Architecture:
    +-----------------+     +------------------+     +-----------------+
    |  ContentSource  | --> | EnrichmentPipeline| --> |  HTTP API / CLI |
    | (memory / dir)  |     |  (cached)         |     |  llms.txt       |
    +-----------------+     +------------------+     +-----------------+
             |                                               ^
             v                                               |
    +-----------------+     +------------------+     +-----------------+
    | CatalogSnapshot | --> |   Graph builders  | --> |  LayeredLayout  |
    | (versioned maps)|     | (actor, view, ...)|     |   (networkx)    |
    +-----------------+     +------------------+     +-----------------+

Invariants:
    - Resolution is pure: raw references are never mutated
    - Absence never raises; broken pointers become diagnostics
    - Node and edge ids are deterministic, so graphs are reproducible
"""

from ._version import __version__

__all__ = ["__version__"]
