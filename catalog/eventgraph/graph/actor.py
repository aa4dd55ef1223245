"""
Actor graph: the views an actor reads and the commands it issues.

    event --subscribes--> view --informs--> ACTOR --issues--> command --subscribes to--> consumer
"""

from __future__ import annotations

from typing import Optional

from ..model.types import CollectionName
from ..resolve.index import consumers_of_message, entity_consumers_of_message
from .builder import GraphBuilder
from .labels import INFORMS, ISSUES, SUBSCRIBES, SUBSCRIBES_TO
from .layout import LayoutEngine
from .model import NodeGraph
from .snapshot import CatalogSnapshot


def build_actor_graph(
    snapshot: CatalogSnapshot,
    entity_id: str,
    version: Optional[str] = None,
    mode: str = "simple",
    layout: Optional[LayoutEngine] = None,
) -> NodeGraph:
    actor = snapshot.find(CollectionName.ACTORS, entity_id, version)
    if actor is None:
        return NodeGraph.empty()

    builder = GraphBuilder(mode)
    builder.add_node(actor)

    for ref in actor.refs("reads"):
        view = snapshot.find(CollectionName.VIEWS, ref.id, ref.version)
        if view is None:
            continue
        builder.add_node(view)
        builder.add_edge(view, actor, INFORMS, color_key=view.id)

        for event_ref in view.refs("subscribes"):
            event = snapshot.find(CollectionName.EVENTS, event_ref.id, event_ref.version)
            if event is None:
                continue
            builder.add_node(event)
            builder.add_edge(event, view, SUBSCRIBES, color_key=event.id)

    for ref in actor.refs("issues"):
        command = snapshot.find(CollectionName.COMMANDS, ref.id, ref.version)
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
