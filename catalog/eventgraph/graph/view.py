"""
View graph: the events feeding a read model and the actors it informs.

    producer --> event --subscribes--> VIEW --informs--> actor --issues--> command --> consumer
"""

from __future__ import annotations

from typing import Optional

from ..model.types import CollectionName
from ..resolve.index import (
    consumers_of_message,
    entity_consumers_of_message,
    entity_producers_of_message,
    producers_of_message,
)
from .builder import GraphBuilder
from .labels import EMITS, INFORMS, ISSUES, SUBSCRIBES, SUBSCRIBES_TO, service_label_as_producer
from .layout import LayoutEngine
from .model import NodeGraph
from .snapshot import CatalogSnapshot


def build_view_graph(
    snapshot: CatalogSnapshot,
    entity_id: str,
    version: Optional[str] = None,
    mode: str = "simple",
    layout: Optional[LayoutEngine] = None,
) -> NodeGraph:
    view = snapshot.find(CollectionName.VIEWS, entity_id, version)
    if view is None:
        return NodeGraph.empty()

    builder = GraphBuilder(mode)
    builder.add_node(view)

    for ref in view.refs("subscribes"):
        event = snapshot.find(CollectionName.EVENTS, ref.id, ref.version)
        if event is None:
            continue
        builder.add_node(event)
        builder.add_edge(event, view, SUBSCRIBES, color_key=event.id)

        for service in producers_of_message(snapshot.services, event):
            builder.add_node(service)
            builder.add_edge(service, event, service_label_as_producer(event), color_key=event.id)
        for producer in entity_producers_of_message(snapshot.entities, event):
            builder.add_node(producer)
            builder.add_edge(producer, event, EMITS, color_key=event.id)

    for ref in view.refs("informs"):
        actor = snapshot.find(CollectionName.ACTORS, ref.id, ref.version)
        if actor is None:
            continue
        builder.add_node(actor)
        builder.add_edge(view, actor, INFORMS, color_key=view.id)

        for command_ref in actor.refs("issues"):
            command = snapshot.find(CollectionName.COMMANDS, command_ref.id, command_ref.version)
            if command is None:
                continue
            builder.add_node(command)
            builder.add_edge(actor, command, ISSUES, color_key=command.id)

            consumers = entity_consumers_of_message(snapshot.entities, command) + consumers_of_message(
                snapshot.services, command
            )
            for consumer in consumers:
                builder.add_node(consumer)
                builder.add_edge(command, consumer, SUBSCRIBES_TO, color_key=command.id)

    return builder.build(layout)
