"""
Content sources: where authored catalog records come from.

Backends:
- InMemoryContentSource (tests, embedding)
- DirectoryContentSource (a catalog checkout on disk)
"""

from .base import ContentSource, create_content_source
from .filesystem import DirectoryContentSource
from .memory import InMemoryContentSource

__all__ = [
    "ContentSource",
    "DirectoryContentSource",
    "InMemoryContentSource",
    "create_content_source",
]
