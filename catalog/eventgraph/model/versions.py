"""
Version resolution for catalog records.

Authored versions are free-form strings. Strict semantic versions are
parsed as such, prerelease tags included; other text that looks numeric
is coerced ("1" -> 1.0.0, "v2.1" -> 2.1.0). Both use
the semantic_version library; anything else falls back to plain string
comparison. Ordering is therefore total and never raises.

Invariants:
    - Parsable versions sort before unparsable ones
    - Equal coerced versions are ordered by their raw strings
    - "latest" or a missing specifier matches only the latest version

Example:
    >>> satisfies("1.2.0", "^1.0.0")
    True
    >>> satisfies("2.0.0", "latest", latest="2.0.0")
    True
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import TYPE_CHECKING, Iterable, Optional

from semantic_version import NpmSpec, Version

if TYPE_CHECKING:
    from .types import Entity

LATEST = "latest"

_NUMERIC = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def coerce_version(text: Optional[str]) -> Optional[Version]:
    """Parse a version string, strictly first and then leniently.

    Strict semantic versions keep their prerelease tags, so 1.0.0-rc.2
    orders below 1.0.0-rc.10 and both below 1.0.0.

    Returns:
        The parsed Version, or None when the text has no numeric part.
    """
    if not text:
        return None
    text = str(text)
    try:
        return Version(text)
    except ValueError:
        pass
    match = _NUMERIC.search(text)
    if match is None:
        return None
    try:
        return Version.coerce(match.group(0))
    except ValueError:
        return None


def compare_versions(a: str, b: str) -> int:
    """Three-way comparison of two version strings, ascending."""
    va, vb = coerce_version(a), coerce_version(b)
    if va is not None and vb is not None:
        if va != vb:
            return -1 if va < vb else 1
    elif va is not None:
        return 1
    elif vb is not None:
        return -1
    if a == b:
        return 0
    return -1 if a < b else 1


def sort_latest_first(family: Iterable["Entity"]) -> list["Entity"]:
    """Order a version family from newest to oldest."""
    return sorted(
        family,
        key=cmp_to_key(lambda x, y: compare_versions(y.version, x.version)),
    )


def latest_of(family: Iterable["Entity"]) -> Optional["Entity"]:
    ordered = sort_latest_first(family)
    return ordered[0] if ordered else None


def satisfies(candidate: str, specifier: Optional[str], latest: Optional[str] = None) -> bool:
    """Check whether a candidate version satisfies a specifier.

    Args:
        candidate: Version of the record being tested
        specifier: Exact version, npm-style range, "latest" or None
        latest: Latest version of the family, needed for "latest"/None

    Returns:
        True on exact match, range match, or when the candidate is the
        latest and the specifier asks for the latest. Invalid ranges
        and unparsable candidates never match a range.
    """
    if specifier is None or specifier == LATEST:
        return latest is not None and candidate == latest
    if candidate == specifier:
        return True
    version = coerce_version(candidate)
    if version is None:
        return False
    try:
        return NpmSpec(specifier).match(version)
    except ValueError:
        return False
