"""
Exception hierarchy for eventgraph.

Missing data is never an error in this package: an unknown focal entity
yields an empty graph and an unresolvable pointer is dropped and recorded
as a diagnostic. The exceptions below cover programming and configuration
mistakes only.
"""

from __future__ import annotations

from typing import Any


class EventGraphError(Exception):
    """Base class for all eventgraph errors.

    Attributes:
        message: Human readable description
        details: Extra structured context for logs and API responses
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class UnknownCollectionError(EventGraphError):
    """Raised when a collection name is not one of the catalog collections."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown collection: {name}", {"collection": name})
        self.name = name


class UnknownGraphKindError(EventGraphError):
    """Raised when a graph is requested for an unsupported focal kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported graph kind: {kind}", {"kind": kind})
        self.kind = kind


class ContentLoadError(EventGraphError):
    """Raised when an authored content file cannot be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to load {path}: {reason}", {"path": path})
        self.path = path
        self.reason = reason


class BrokenReferenceError(EventGraphError):
    """Raised by strict validation when references do not resolve.

    Only raised on explicit request (strict mode); normal resolution
    records broken references and carries on.
    """

    def __init__(self, count: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"{count} broken reference(s) found", details)
        self.count = count
