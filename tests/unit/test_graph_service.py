"""
Unit tests for graph dispatch and the async graph service.
"""

import pytest

from catalog.eventgraph.config import Settings
from catalog.eventgraph.errors import UnknownGraphKindError
from catalog.eventgraph.graph.service import GraphService, build_graph, normalize_kind
from tests.catalog_fixtures import actor_catalog, policy_catalog, snapshot_of, source_of


class TestNormalizeKind:
    """Tests for normalize_kind."""

    @pytest.mark.parametrize(
        "kind,expected",
        [("actor", "actors"), ("Views", "views"), ("policy", "policies"), ("event", "events"), ("messages", "messages")],
    )
    def test_aliases(self, kind, expected):
        assert normalize_kind(kind) == expected

    def test_unknown_kind(self):
        with pytest.raises(UnknownGraphKindError) as excinfo:
            normalize_kind("flows")
        assert excinfo.value.kind == "flows"


class TestBuildGraph:
    """Tests for build_graph dispatch."""

    def test_dispatches_by_kind(self):
        snapshot = snapshot_of(policy_catalog())

        policy_graph = build_graph(snapshot, "policy", "OrderPolicy", "1.0.0")
        event_graph = build_graph(snapshot, "events", "OrderCreated", "1.0.0")

        assert policy_graph.node("OrderPolicy-1.0.0").type == "policies"
        assert event_graph.node("OrderCreated-1.0.0").type == "events"

    def test_collection_specific_message_kind(self):
        """A command graph does not find an event of the same id."""
        snapshot = snapshot_of(policy_catalog())

        assert build_graph(snapshot, "commands", "OrderCreated", "1.0.0").nodes == []
        assert build_graph(snapshot, "messages", "OrderCreated", "1.0.0").nodes != []


class TestGraphService:
    """Tests for GraphService."""

    @pytest.mark.asyncio
    async def test_build_with_layout(self):
        service = GraphService(source_of(actor_catalog()), Settings(project_dir="/nonexistent"))

        graph = await service.build("actor", "CustomerSupportAgent", "1.0.0")

        actor = graph.node("CustomerSupportAgent-1.0.0")
        assert actor is not None
        assert actor.position["x"] > 0

    @pytest.mark.asyncio
    async def test_latest_version(self):
        service = GraphService(source_of(actor_catalog()), Settings(project_dir="/nonexistent"))

        graph = await service.build("actors", "CustomerSupportAgent", "latest", with_layout=False)

        assert graph.node("CustomerSupportAgent-1.0.0") is not None
        assert all(node.position == {"x": 0.0, "y": 0.0} for node in graph.nodes)

    @pytest.mark.asyncio
    async def test_unknown_kind_fails_before_loading(self):
        source = source_of(actor_catalog())
        service = GraphService(source, Settings(project_dir="/nonexistent"))

        with pytest.raises(UnknownGraphKindError):
            await service.build("flows", "X")
        assert source.load_count == 0
