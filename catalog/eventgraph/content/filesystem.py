"""
Directory-backed content source.

Reads a catalog checkout laid out the way catalog authors write it: each
record lives in its own folder as ``index.md``/``index.mdx`` with YAML
front matter, or as ``index.yaml``/``index.yml``. A record belongs to the
collection named by its nearest ancestor folder that is a collection
name, so nested layouts such as
``domains/Orders/services/OrderService/events/OrderCreated/index.mdx``
work. Older versions live under a ``versioned/<version>/`` folder.

Invariants:
    - The tree is scanned once per source and then served from memory
    - reload() discards the scan so the next call re-reads the tree
    - Files that are not valid UTF-8 or YAML raise ContentLoadError
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ContentLoadError
from ..model.types import CollectionName, Entity, to_collection

logger = logging.getLogger(__name__)

INDEX_FILES = ("index.mdx", "index.md", "index.yaml", "index.yml")

_COLLECTION_NAMES = {collection.value: collection for collection in CollectionName}


def parse_front_matter(text: str) -> Optional[dict[str, Any]]:
    """Extract the YAML front matter block of a markdown document."""
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return None
    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            loaded = yaml.safe_load("\n".join(lines[1:index]))
            return loaded if isinstance(loaded, dict) else None
    return None


def collection_for(path: Path, root: Path) -> Optional[CollectionName]:
    """Nearest ancestor folder of path (below root) naming a collection."""
    parts = path.relative_to(root).parts[:-1]
    for part in reversed(parts):
        if part in _COLLECTION_NAMES:
            return _COLLECTION_NAMES[part]
    return None


class DirectoryContentSource:
    """Content source reading a catalog directory tree."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self._index: Optional[dict[CollectionName, list[Entity]]] = None
        self._lock = threading.Lock()

    def reload(self) -> None:
        with self._lock:
            self._index = None

    def _load_file(self, path: Path) -> Optional[dict[str, Any]]:
        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(text)
            else:
                data = parse_front_matter(text)
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise ContentLoadError(str(path), str(e)) from e
        if data is not None and not isinstance(data, dict):
            raise ContentLoadError(str(path), "expected a mapping")
        return data

    def _scan(self) -> dict[CollectionName, list[Entity]]:
        index: dict[CollectionName, list[Entity]] = defaultdict(list)
        if not self.root.is_dir():
            logger.warning("Content directory does not exist: %s", self.root)
            return index

        count = 0
        for path in sorted(self.root.rglob("index.*")):
            if path.name not in INDEX_FILES:
                continue
            collection = collection_for(path, self.root)
            if collection is None:
                continue
            data = self._load_file(path)
            if not data or "id" not in data:
                logger.debug("Skipping %s: no id in front matter", path)
                continue
            relative = path.relative_to(self.root).as_posix()
            index[collection].append(
                Entity(collection=collection, data=data, file_path=relative)
            )
            count += 1

        logger.info("Scanned catalog content", extra={"root": str(self.root), "records": count})
        return index

    def _ensure_index(self) -> dict[CollectionName, list[Entity]]:
        with self._lock:
            if self._index is None:
                self._index = self._scan()
            return self._index

    async def get_collection(self, name: CollectionName | str) -> list[Entity]:
        collection = to_collection(name)
        index = await asyncio.to_thread(self._ensure_index)
        return list(index.get(collection, ()))
