"""
Unit tests for version resolution.

Tests cover:
- Lenient coercion
- Ordering with unparsable versions
- Range and "latest" matching
"""

import pytest

from catalog.eventgraph.model.versions import (
    coerce_version,
    compare_versions,
    latest_of,
    satisfies,
    sort_latest_first,
)
from tests.catalog_fixtures import record


class TestCoerceVersion:
    """Tests for coerce_version."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1.2.3", "1.2.3"),
            ("1", "1.0.0"),
            ("v2.1", "2.1.0"),
            ("release-3.0.1", "3.0.1"),
            ("1.0.0-rc.1", "1.0.0-rc.1"),
        ],
    )
    def test_coerces_numeric_versions(self, text, expected):
        """Anything with a numeric component coerces."""
        assert str(coerce_version(text)) == expected

    def test_unparsable_returns_none(self):
        """Text without digits does not coerce."""
        assert coerce_version("beta") is None
        assert coerce_version("") is None
        assert coerce_version(None) is None


class TestOrdering:
    """Tests for version ordering."""

    def test_numeric_not_lexical(self):
        """10.0.0 sorts above 9.0.0."""
        family = [record("events", "E", v) for v in ["9.0.0", "10.0.0", "1.0.0"]]

        assert [e.version for e in sort_latest_first(family)] == ["10.0.0", "9.0.0", "1.0.0"]

    def test_unparsable_sorts_after_parsable(self):
        """Versions that cannot be coerced fall to the end, ordered by string."""
        family = [record("events", "E", v) for v in ["alpha", "1.0.0", "beta", "2.0.0"]]

        assert [e.version for e in sort_latest_first(family)] == ["2.0.0", "1.0.0", "beta", "alpha"]

    def test_equal_coerced_versions_are_ordered_deterministically(self):
        """Ties on the coerced value are broken by the raw string."""
        assert compare_versions("1", "1.0.0") != 0
        assert compare_versions("1", "1.0.0") == -compare_versions("1.0.0", "1")

    def test_prerelease_sorts_below_release(self):
        """A prerelease never outranks the release it precedes."""
        family = [record("events", "E", v) for v in ["1.0.0-beta", "1.0.0", "1.0.0-rc.1"]]

        assert [e.version for e in sort_latest_first(family)] == ["1.0.0", "1.0.0-rc.1", "1.0.0-beta"]
        assert latest_of(family).version == "1.0.0"

    def test_prerelease_identifiers_compare_numerically(self):
        """rc.10 is newer than rc.2."""
        family = [record("events", "E", v) for v in ["1.0.0-rc.2", "1.0.0-rc.10"]]

        assert latest_of(family).version == "1.0.0-rc.10"
        assert compare_versions("1.0.0-rc.2", "1.0.0-rc.10") == -1

    def test_latest_of(self):
        """latest_of picks the highest version."""
        family = [record("events", "E", v) for v in ["0.0.1", "0.1.0"]]
        assert latest_of(family).version == "0.1.0"
        assert latest_of([]) is None


class TestSatisfies:
    """Tests for satisfies."""

    def test_caret_range(self):
        """^1.0.0 matches 1.5.0 and not 2.0.0."""
        assert satisfies("1.5.0", "^1.0.0")
        assert not satisfies("2.0.0", "^1.0.0")

    def test_tilde_and_x_ranges(self):
        """Tilde and x ranges behave like npm."""
        assert satisfies("1.2.5", "~1.2.0")
        assert not satisfies("1.3.0", "~1.2.0")
        assert satisfies("1.9.0", "1.x")

    def test_exact_match(self):
        """Exact strings match even when not semver."""
        assert satisfies("1.0.0", "1.0.0")
        assert satisfies("draft", "draft")

    def test_latest_matches_only_latest(self):
        """latest/None match only the family's latest version."""
        assert satisfies("2.0.0", "latest", latest="2.0.0")
        assert not satisfies("1.0.0", "latest", latest="2.0.0")
        assert satisfies("2.0.0", None, latest="2.0.0")
        assert not satisfies("2.0.0", None)

    def test_unparsable_candidate_never_matches_range(self):
        """A non-semver candidate fails range checks without raising."""
        assert not satisfies("draft", "^1.0.0")
