"""
Unit tests for versioned maps and reference hydration.
"""

from catalog.eventgraph.model.diagnostics import Diagnostics
from catalog.eventgraph.model.versioned_map import VersionedMap, find_in_map
from catalog.eventgraph.resolve.hydrate import hydrate
from tests.catalog_fixtures import record, ref


def _orders_map():
    return VersionedMap.from_entities(
        [record("events", "OrderCreated", v) for v in ["1.0.0", "2.0.0", "1.5.0"]]
        + [record("events", "OrderShipped", "0.0.1")]
    )


class TestVersionedMap:
    """Tests for VersionedMap."""

    def test_families_are_sorted_latest_first(self):
        """Each family is ordered newest first."""
        vmap = _orders_map()

        assert vmap.versions("OrderCreated") == ["2.0.0", "1.5.0", "1.0.0"]
        assert vmap.latest_version("OrderCreated") == "2.0.0"
        assert "OrderShipped" in vmap
        assert len(vmap) == 2

    def test_is_latest(self):
        """is_latest compares against the family head."""
        vmap = _orders_map()
        assert vmap.is_latest(record("events", "OrderCreated", "2.0.0"))
        assert not vmap.is_latest(record("events", "OrderCreated", "1.0.0"))


class TestFindInMap:
    """Tests for find_in_map."""

    def test_latest_and_missing_version(self):
        """No version or "latest" returns the newest."""
        vmap = _orders_map()
        assert find_in_map(vmap, "OrderCreated").version == "2.0.0"
        assert find_in_map(vmap, "OrderCreated", "latest").version == "2.0.0"

    def test_exact_version(self):
        """An exact version returns that record."""
        assert find_in_map(_orders_map(), "OrderCreated", "1.0.0").version == "1.0.0"

    def test_range_returns_newest_match(self):
        """A range returns the newest version that satisfies it."""
        assert find_in_map(_orders_map(), "OrderCreated", "^1.0.0").version == "1.5.0"

    def test_unknown_id_or_version(self):
        """Unresolvable pointers return None."""
        vmap = _orders_map()
        assert find_in_map(vmap, "Nope") is None
        assert find_in_map(vmap, "OrderCreated", "3.0.0") is None


class TestHydrate:
    """Tests for hydrate."""

    def test_resolved_and_raw(self):
        """Resolved drops broken pointers, raw keeps every authored pointer."""
        service = record(
            "services",
            "OrderService",
            "1.0.0",
            sends=[ref("OrderCreated", "1.0.0"), ref("Ghost", "1.0.0")],
        )
        diagnostics = Diagnostics()

        resolved, raw = hydrate(service, "sends", [_orders_map()], diagnostics)

        assert [(e.id, e.version) for e in resolved] == [("OrderCreated", "1.0.0")]
        assert raw == [{"id": "OrderCreated", "version": "1.0.0"}, {"id": "Ghost", "version": "1.0.0"}]
        assert len(diagnostics.broken_references) == 1
        assert diagnostics.broken_references[0].target_id == "Ghost"

    def test_missing_field_is_empty(self):
        """A record without the field hydrates to empty lists."""
        resolved, raw = hydrate(record("services", "S", "1.0.0"), "sends", [_orders_map()])
        assert resolved == []
        assert raw == []

    def test_raw_is_not_shared_with_record(self):
        """Mutating raw output leaves the record untouched."""
        service = record("services", "S", "1.0.0", sends=[ref("OrderCreated")])
        _, raw = hydrate(service, "sends", [_orders_map()])
        raw[0]["id"] = "Changed"
        assert service.data["sends"][0]["id"] == "OrderCreated"
