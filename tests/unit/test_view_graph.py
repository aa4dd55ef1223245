"""
Unit tests for the view graph.
"""

from catalog.eventgraph.graph.view import build_view_graph
from tests.catalog_fixtures import record, ref, snapshot_of, view_catalog


class TestViewGraph:
    """Tests for build_view_graph."""

    def test_producers_view_actor_and_commands(self):
        graph = build_view_graph(snapshot_of(view_catalog()), "OrderSummaryView", "1.0.0")
        labels = {edge.id: edge.label for edge in graph.edges}

        assert len(graph.nodes) == 6
        assert labels == {
            "OrderConfirmed-0.0.1-OrderSummaryView-1.0.0": "subscribes",
            "OrderService-1.0.0-OrderConfirmed-0.0.1": "publishes \nevent",
            "OrderEntity-1.0.0-OrderConfirmed-0.0.1": "emits",
            "OrderSummaryView-1.0.0-CustomerSupportAgent-1.0.0": "informs",
            "CustomerSupportAgent-1.0.0-UpdateInventory-1.0.0": "issues",
            "UpdateInventory-1.0.0-OrderEntity-1.0.0": "subscribes to",
            "UpdateInventory-1.0.0-OrderService-1.0.0": "subscribes to",
        }

    def test_view_without_relationships(self):
        """A view with no subscribes/informs yields one node and no edges."""
        graph = build_view_graph(snapshot_of(view_catalog()), "EmptyView", "1.0.0")

        assert [n.id for n in graph.nodes] == ["EmptyView-1.0.0"]
        assert graph.edges == []

    def test_issued_command_is_not_confused_with_event(self):
        """Commands issued by informed actors resolve against commands only."""
        records = [
            record("events", "Sync", "1.0.0"),
            record("commands", "Sync", "1.0.0"),
            record("views", "SyncView", "1.0.0", informs=[ref("Operator", "1.0.0")]),
            record("actors", "Operator", "1.0.0", issues=[ref("Sync", "1.0.0")]),
        ]

        graph = build_view_graph(snapshot_of(records), "SyncView", "1.0.0")

        assert graph.node("Sync-1.0.0").type == "commands"
        assert graph.edge("Operator-1.0.0-Sync-1.0.0").label == "issues"

    def test_unknown_view(self):
        assert build_view_graph(snapshot_of(view_catalog()), "Missing").nodes == []
