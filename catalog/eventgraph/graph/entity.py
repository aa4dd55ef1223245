"""
Entity graph: messages an aggregate/entity handles and emits.

Receiving side: producers -> message -> [channel] -> ENTITY. Channels on
the receiving side get node ids suffixed with "-recv" so a channel used
in both directions does not fold the graph into a cycle. Commands are
expanded with the policies dispatching them and the actors issuing them.

Sending side: ENTITY -> message -> [channel] -> consumers. Events are
expanded with the policies they trigger and the views subscribed to them.

The entity itself is filtered out of every expansion.
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
from .chains import add_chains_for_message
from .labels import (
    EMITS,
    ROUTES_TO,
    SUBSCRIBES_TO,
    entity_receive_label,
    message_label_as_source,
    service_label_as_producer,
)
from .layout import LayoutEngine
from .model import NodeGraph, node_id
from .snapshot import CatalogSnapshot

RECEIVE_SUFFIX = "-recv"


def build_entity_graph(
    snapshot: CatalogSnapshot,
    entity_id: str,
    version: Optional[str] = None,
    mode: str = "simple",
    layout: Optional[LayoutEngine] = None,
) -> NodeGraph:
    entity = snapshot.find(CollectionName.ENTITIES, entity_id, version)
    if entity is None:
        return NodeGraph.empty()

    builder = GraphBuilder(mode)
    builder.add_node(entity)

    for ref in entity.refs("receives"):
        message = snapshot.find_message(ref.id, ref.version)
        if message is None:
            continue
        builder.add_node(message)
        label = entity_receive_label(message)

        if ref.from_:
            for channel_ref in ref.from_:
                channel = snapshot.find_channel(channel_ref.id, channel_ref.version)
                if channel is None:
                    builder.add_edge(message, entity, label, color_key=message.id)
                    continue
                channel_key = builder.add_node(channel, node_key=node_id(channel) + RECEIVE_SUFFIX)
                builder.add_edge(message, channel_key, ROUTES_TO, color_key=message.id)
                builder.add_edge(channel_key, entity, label, color_key=message.id)
        else:
            builder.add_edge(message, entity, label, color_key=message.id)

        for service in producers_of_message(snapshot.services, message):
            builder.add_node(service)
            builder.add_edge(service, message, service_label_as_producer(message), color_key=message.id)
        for producer in entity_producers_of_message(snapshot.entities, message):
            if producer.same_as(entity):
                continue
            builder.add_node(producer)
            builder.add_edge(producer, message, EMITS, color_key=message.id)

        if message.collection == CollectionName.COMMANDS:
            add_chains_for_message(builder, snapshot, message, focus=entity)

    for ref in entity.refs("sends"):
        message = snapshot.find_message(ref.id, ref.version)
        if message is None:
            continue
        builder.add_node(message)
        builder.add_edge(entity, message, EMITS, color_key=message.id)

        channels = []
        for channel_ref in ref.to or []:
            channel = snapshot.find_channel(channel_ref.id, channel_ref.version)
            if channel is None:
                continue
            builder.add_node(channel)
            builder.add_edge(message, channel, ROUTES_TO, color_key=message.id)
            channels.append(channel)

        # consumers hang off the channel only when it is unambiguous
        origin = channels[0] if len(channels) == 1 else message
        through_channel = len(channels) == 1

        for service in consumers_of_message(snapshot.services, message):
            builder.add_node(service)
            builder.add_edge(
                origin, service, message_label_as_source(message, through_channel), color_key=message.id
            )
        for consumer in entity_consumers_of_message(snapshot.entities, message):
            if consumer.same_as(entity):
                continue
            builder.add_node(consumer)
            builder.add_edge(origin, consumer, SUBSCRIBES_TO, color_key=message.id)

        if message.collection == CollectionName.EVENTS:
            add_chains_for_message(builder, snapshot, message, focus=entity)

    return builder.build(layout)
