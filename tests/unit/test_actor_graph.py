"""
Unit tests for the actor graph.
"""

from catalog.eventgraph.graph.actor import build_actor_graph
from catalog.eventgraph.graph.layout import LayeredLayout
from tests.catalog_fixtures import actor_catalog, record, ref, snapshot_of


def _labels(graph):
    return {edge.id: edge.label for edge in graph.edges}


class TestActorGraph:
    """Tests for build_actor_graph."""

    def test_full_actor_graph(self):
        """Actor, view, events, command and both consumers with their labels."""
        graph = build_actor_graph(snapshot_of(actor_catalog()), "CustomerSupportAgent", "1.0.0")

        assert {node.id for node in graph.nodes} == {
            "CustomerSupportAgent-1.0.0",
            "OrderSummaryView-1.0.0",
            "OrderConfirmed-0.0.1",
            "OrderAmended-0.0.1",
            "UpdateInventory-1.0.0",
            "InventoryService-1.0.0",
            "InventoryEntity-1.0.0",
        }
        assert _labels(graph) == {
            "OrderSummaryView-1.0.0-CustomerSupportAgent-1.0.0": "informs",
            "OrderConfirmed-0.0.1-OrderSummaryView-1.0.0": "subscribes",
            "OrderAmended-0.0.1-OrderSummaryView-1.0.0": "subscribes",
            "CustomerSupportAgent-1.0.0-UpdateInventory-1.0.0": "issues",
            "UpdateInventory-1.0.0-InventoryEntity-1.0.0": "subscribes to",
            "UpdateInventory-1.0.0-InventoryService-1.0.0": "subscribes to",
        }

    def test_node_types_and_data(self):
        """Nodes carry their type, the mode and the record payload."""
        graph = build_actor_graph(snapshot_of(actor_catalog()), "CustomerSupportAgent", "1.0.0", mode="full")

        actor = graph.node("CustomerSupportAgent-1.0.0")
        assert actor.type == "actor"
        assert actor.data["mode"] == "full"
        assert actor.data["actor"]["name"] == "Customer Support Agent"
        assert graph.node("OrderSummaryView-1.0.0").type == "view"
        assert graph.node("OrderConfirmed-0.0.1").type == "events"
        assert graph.node("UpdateInventory-1.0.0").type == "commands"
        assert graph.node("InventoryEntity-1.0.0").type == "entities"
        assert graph.node("InventoryService-1.0.0").type == "services"

    def test_latest_is_default(self):
        """No version resolves to the latest actor."""
        graph = build_actor_graph(snapshot_of(actor_catalog()), "CustomerSupportAgent")
        assert graph.node("CustomerSupportAgent-1.0.0") is not None

    def test_unknown_actor_is_empty(self):
        graph = build_actor_graph(snapshot_of(actor_catalog()), "Nobody", "1.0.0")
        assert graph.nodes == []
        assert graph.edges == []

    def test_issued_command_is_not_confused_with_event(self):
        """An event sharing a command's id and version is never taken for the issued command."""
        records = [
            record("events", "Sync", "1.0.0"),
            record("commands", "Sync", "1.0.0"),
            record("actors", "Operator", "1.0.0", issues=[ref("Sync", "1.0.0")]),
        ]

        graph = build_actor_graph(snapshot_of(records), "Operator", "1.0.0")

        assert graph.node("Sync-1.0.0").type == "commands"
        assert graph.edge("Operator-1.0.0-Sync-1.0.0").label == "issues"

    def test_actor_without_relationships(self):
        """A bare actor yields exactly its own node."""
        graph = build_actor_graph(snapshot_of([record("actors", "Solo", "1.0.0")]), "Solo", "1.0.0")
        assert [n.id for n in graph.nodes] == ["Solo-1.0.0"]
        assert graph.edges == []

    def test_edges_carry_colors(self):
        graph = build_actor_graph(snapshot_of(actor_catalog()), "CustomerSupportAgent", "1.0.0")
        assert all(edge.data["customColor"].startswith("#") for edge in graph.edges)

    def test_layout_positions(self):
        """With a layout engine, events sit left of the view, the view left of the actor."""
        graph = build_actor_graph(
            snapshot_of(actor_catalog()), "CustomerSupportAgent", "1.0.0", layout=LayeredLayout()
        )
        x = {node.id: node.position["x"] for node in graph.nodes}

        assert x["OrderConfirmed-0.0.1"] < x["OrderSummaryView-1.0.0"] < x["CustomerSupportAgent-1.0.0"]
        assert x["CustomerSupportAgent-1.0.0"] < x["UpdateInventory-1.0.0"] < x["InventoryEntity-1.0.0"]

    def test_deterministic(self):
        """Building twice gives identical output."""
        snap = snapshot_of(actor_catalog())
        first = build_actor_graph(snap, "CustomerSupportAgent", "1.0.0", layout=LayeredLayout())
        second = build_actor_graph(snap, "CustomerSupportAgent", "1.0.0", layout=LayeredLayout())
        assert first.to_dict() == second.to_dict()
