"""
Resource folder lookup for generated catalog paths.

Generated assets are published under ``/generated/<collection>/<folder>``
where <folder> is the folder the record was authored in, which need not
equal its id. ProjectFolderResolver scans the project directory once and
answers (id, version) -> folder name.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

import yaml

from ..content.filesystem import INDEX_FILES, parse_front_matter

logger = logging.getLogger(__name__)

FolderNameResolver = Callable[[str, str], Optional[str]]

_SKIP_DIRS = {"node_modules", ".git", "dist", ".eventcatalog-core"}


def _record_folder(index_file: Path) -> Path:
    folder = index_file.parent
    # <resource>/versioned/<version>/index.mdx
    if folder.parent.name == "versioned":
        return folder.parent.parent
    return folder


class ProjectFolderResolver:
    """Resolve the authored folder name of a record in a project directory."""

    def __init__(self, project_dir: str | Path) -> None:
        self.project_dir = Path(project_dir)
        self._folders: Optional[dict[tuple[str, str], str]] = None
        self._lock = threading.Lock()

    def _scan(self) -> dict[tuple[str, str], str]:
        folders: dict[tuple[str, str], str] = {}
        if not self.project_dir.is_dir():
            return folders
        for path in self.project_dir.rglob("index.*"):
            if path.name not in INDEX_FILES or _SKIP_DIRS.intersection(path.parts):
                continue
            try:
                text = path.read_text(encoding="utf-8")
                data = yaml.safe_load(text) if path.suffix in (".yaml", ".yml") else parse_front_matter(text)
            except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
                logger.debug("Skipping unreadable resource file %s: %s", path, e)
                continue
            if not isinstance(data, dict) or "id" not in data:
                continue
            key = (str(data["id"]), str(data.get("version", "")))
            folders.setdefault(key, _record_folder(path).name)
        return folders

    def __call__(self, entity_id: str, version: str) -> Optional[str]:
        with self._lock:
            if self._folders is None:
                self._folders = self._scan()
            return self._folders.get((entity_id, version))


def null_folder_resolver(entity_id: str, version: str) -> Optional[str]:
    return None
