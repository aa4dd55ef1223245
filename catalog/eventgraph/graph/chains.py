"""
Chain expansion: one hop beyond a message's direct neighbours.

Policy chains show which policies turn an event into a command and who
sits on the far side. View/actor chains show which read models an event
feeds and which actors they inform (or, from a command, which actors
issue it and which views those actors read).

Every expansion accepts the focal record as ``focus`` and never adds it
again, so an entity that both emits an event and subscribes to the
resulting command does not loop back into its own graph.
"""

from __future__ import annotations

from typing import Optional

from ..model.types import CollectionName, Entity
from ..resolve.index import (
    actors_issuing_command,
    consumers_of_message,
    entity_consumers_of_message,
    entity_producers_of_message,
    policies_dispatching_command,
    policies_triggered_by_event,
    producers_of_message,
    views_subscribed_to_event,
)
from .builder import GraphBuilder
from .labels import (
    DISPATCHES,
    EMITS,
    INFORMS,
    ISSUES,
    SUBSCRIBES,
    SUBSCRIBES_TO,
    TRIGGERS,
    message_label_as_source,
    service_label_as_producer,
)
from .snapshot import CatalogSnapshot


def _is_focus(entity: Entity, focus: Optional[Entity]) -> bool:
    return focus is not None and entity.same_as(focus)


def add_policy_chain_for_command(
    builder: GraphBuilder, snapshot: CatalogSnapshot, command: Entity, focus: Optional[Entity] = None
) -> None:
    """Policies dispatching a command, the events triggering them and their producers."""
    for policy in policies_dispatching_command(snapshot.policies, command):
        if _is_focus(policy, focus):
            continue
        builder.add_node(policy)
        builder.add_edge(policy, command, DISPATCHES, color_key=command.id)

        for ref in policy.refs("receives"):
            event = snapshot.find(CollectionName.EVENTS, ref.id, ref.version)
            if event is None:
                continue
            builder.add_node(event)
            builder.add_edge(event, policy, TRIGGERS, color_key=event.id)

            for service in producers_of_message(snapshot.services, event):
                builder.add_node(service)
                builder.add_edge(service, event, service_label_as_producer(event), color_key=event.id)
            for producer in entity_producers_of_message(snapshot.entities, event):
                if _is_focus(producer, focus):
                    continue
                builder.add_node(producer)
                builder.add_edge(producer, event, EMITS, color_key=event.id)


def add_policy_chain_for_event(
    builder: GraphBuilder, snapshot: CatalogSnapshot, event: Entity, focus: Optional[Entity] = None
) -> None:
    """Policies an event triggers, the commands they dispatch and their consumers."""
    for policy in policies_triggered_by_event(snapshot.policies, event):
        if _is_focus(policy, focus):
            continue
        builder.add_node(policy)
        builder.add_edge(event, policy, TRIGGERS, color_key=event.id)

        for ref in policy.refs("sends"):
            command = snapshot.find(CollectionName.COMMANDS, ref.id, ref.version)
            if command is None:
                continue
            builder.add_node(command)
            builder.add_edge(policy, command, DISPATCHES, color_key=command.id)

            for consumer in entity_consumers_of_message(snapshot.entities, command):
                if _is_focus(consumer, focus):
                    continue
                builder.add_node(consumer)
                builder.add_edge(command, consumer, SUBSCRIBES_TO, color_key=command.id)
            for service in consumers_of_message(snapshot.services, command):
                builder.add_node(service)
                builder.add_edge(command, service, message_label_as_source(command), color_key=command.id)


def add_view_actor_chain_for_event(
    builder: GraphBuilder, snapshot: CatalogSnapshot, event: Entity, focus: Optional[Entity] = None
) -> None:
    """Views subscribed to an event and the actors those views inform."""
    for view in views_subscribed_to_event(snapshot.views, event):
        if _is_focus(view, focus):
            continue
        builder.add_node(view)
        builder.add_edge(event, view, SUBSCRIBES, color_key=event.id)

        for ref in view.refs("informs"):
            actor = snapshot.find(CollectionName.ACTORS, ref.id, ref.version)
            if actor is None or _is_focus(actor, focus):
                continue
            builder.add_node(actor)
            builder.add_edge(view, actor, INFORMS, color_key=view.id)


def add_view_actor_chain_for_command(
    builder: GraphBuilder, snapshot: CatalogSnapshot, command: Entity, focus: Optional[Entity] = None
) -> None:
    """Actors issuing a command and the views those actors read."""
    for actor in actors_issuing_command(snapshot.actors, command):
        if _is_focus(actor, focus):
            continue
        builder.add_node(actor)
        builder.add_edge(actor, command, ISSUES, color_key=command.id)

        for ref in actor.refs("reads"):
            view = snapshot.find(CollectionName.VIEWS, ref.id, ref.version)
            if view is None or _is_focus(view, focus):
                continue
            builder.add_node(view)
            builder.add_edge(view, actor, INFORMS, color_key=view.id)


def add_chains_for_message(
    builder: GraphBuilder, snapshot: CatalogSnapshot, message: Entity, focus: Optional[Entity] = None
) -> None:
    """Expand policy and view/actor chains appropriate to the message kind."""
    if message.collection == CollectionName.EVENTS:
        add_policy_chain_for_event(builder, snapshot, message, focus)
        add_view_actor_chain_for_event(builder, snapshot, message, focus)
    elif message.collection == CollectionName.COMMANDS:
        add_policy_chain_for_command(builder, snapshot, message, focus)
        add_view_actor_chain_for_command(builder, snapshot, message, focus)
