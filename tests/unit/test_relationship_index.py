"""
Unit tests for reverse relationship lookups.
"""

from catalog.eventgraph.resolve.index import (
    actors_issuing_command,
    actors_reading_view,
    consumers_of_message,
    entity_consumers_of_message,
    entity_producers_of_message,
    policies_dispatching_command,
    policies_triggered_by_event,
    producers_of_message,
    reference_matches,
    services_both_sending_and_receiving,
    views_informing_actor,
    views_subscribed_to_event,
)
from catalog.eventgraph.model.types import Reference
from tests.catalog_fixtures import actor_catalog, policy_catalog, record, ref, snapshot_of


class TestReferenceMatches:
    """Tests for the shared matching rule."""

    def test_version_rules(self):
        """Absent, latest, exact and range pointers match; others do not."""
        target = record("events", "OrderCreated", "1.5.0")

        assert reference_matches(Reference(id="OrderCreated"), target)
        assert reference_matches(Reference(id="OrderCreated", version="latest"), target)
        assert reference_matches(Reference(id="OrderCreated", version="1.5.0"), target)
        assert reference_matches(Reference(id="OrderCreated", version="^1.0.0"), target)
        assert not reference_matches(Reference(id="OrderCreated", version="2.0.0"), target)
        assert not reference_matches(Reference(id="OrderShipped"), target)

    def test_range_against_major_bump(self):
        """^1.0.0 does not match a 2.0.0 target."""
        assert not reference_matches(Reference(id="E", version="^1.0.0"), record("events", "E", "2.0.0"))


class TestQueries:
    """Tests for index queries."""

    def test_message_producers_and_consumers(self):
        snap = snapshot_of(policy_catalog())
        created = snap.find_message("OrderCreated")
        process = snap.find_message("ProcessOrder")

        assert [s.id for s in producers_of_message(snap.services, created)] == ["NotificationService"]
        assert consumers_of_message(snap.services, created) == []
        assert [s.id for s in consumers_of_message(snap.services, process)] == ["NotificationService"]

    def test_entity_producers_and_consumers(self):
        entities = [
            record("entities", "Order", "1.0.0", sends=[ref("OrderCreated")], receives=[ref("CreateOrder")]),
        ]
        created = record("events", "OrderCreated", "1.0.0")
        create = record("commands", "CreateOrder", "1.0.0")

        assert entity_producers_of_message(entities, created) == entities
        assert entity_consumers_of_message(entities, create) == entities
        assert entity_consumers_of_message(entities, created) == []

    def test_policies(self):
        snap = snapshot_of(policy_catalog())

        triggered = policies_triggered_by_event(snap.policies, snap.find_message("OrderCreated"))
        dispatching = policies_dispatching_command(snap.policies, snap.find_message("ProcessOrder"))

        assert [(p.id, p.version) for p in triggered] == [("OrderPolicy", "1.0.0")]
        assert [(p.id, p.version) for p in dispatching] == [("OrderPolicy", "1.0.0")]

    def test_views_and_actors(self):
        snap = snapshot_of(actor_catalog())
        agent = snap.find("actors", "CustomerSupportAgent", "1.0.0")
        view = snap.find("views", "OrderSummaryView")

        assert views_subscribed_to_event(snap.views, snap.find_message("OrderConfirmed")) == [view]
        assert views_informing_actor(snap.views, agent) == [view]
        assert actors_reading_view(snap.actors, view) == [agent]
        assert actors_issuing_command(snap.actors, snap.find_message("UpdateInventory")) == [agent]

    def test_services_on_both_sides(self):
        message = record("events", "Ping", "1.0.0")
        both = record("services", "Echo", "1.0.0", sends=[ref("Ping")], receives=[ref("Ping")])
        sender = record("services", "Sender", "1.0.0", sends=[ref("Ping")])

        assert services_both_sending_and_receiving([both, sender], message) == [both]
