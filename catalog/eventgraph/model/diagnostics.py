"""
Diagnostics collected during resolution.

Broken pointers and conflicting edges are data problems, not failures:
they are recorded here so callers (the CLI check command, the API) can
surface them, and strict callers can turn them into an error.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from ..errors import BrokenReferenceError

logger = logging.getLogger(__name__)

BROKEN_REFERENCE = "broken_reference"
LABEL_CONFLICT = "label_conflict"


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    source: str
    message: str
    field: Optional[str] = None
    target_id: Optional[str] = None
    target_version: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class Diagnostics:
    """Ordered, de-duplicated collection of diagnostics."""

    items: list[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        if diagnostic in self.items:
            return
        self.items.append(diagnostic)
        logger.debug("Diagnostic recorded: %s", diagnostic.message)

    def broken_reference(
        self, source: str, field_name: Optional[str], target_id: str, target_version: Optional[str]
    ) -> None:
        self.add(
            Diagnostic(
                kind=BROKEN_REFERENCE,
                source=source,
                field=field_name,
                target_id=target_id,
                target_version=target_version,
                message=f"{source} references {target_id}@{target_version or 'latest'} which does not exist",
            )
        )

    def label_conflict(self, edge_id: str, kept: str, dropped: str) -> None:
        self.add(
            Diagnostic(
                kind=LABEL_CONFLICT,
                source=edge_id,
                message=f"edge {edge_id} kept label {kept!r}, dropped {dropped!r}",
            )
        )

    @property
    def broken_references(self) -> list[Diagnostic]:
        return [item for item in self.items if item.kind == BROKEN_REFERENCE]

    def raise_for_broken(self) -> None:
        """Raise BrokenReferenceError when any pointer failed to resolve."""
        broken = self.broken_references
        if broken:
            raise BrokenReferenceError(len(broken), {"references": [d.to_dict() for d in broken]})

    def to_list(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    def __len__(self) -> int:
        return len(self.items)
