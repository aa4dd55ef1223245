"""
Channel-aware wiring of messages to their producers and consumers.

A producer always connects straight to the message; each channel it
publishes to hangs off the message with a "routes to" edge. A consumer
connects according to the channels both sides declare:

    consumer declares no channel      message -> consumer
    consumer channel unknown          message -> consumer
    producers declare no channel      message -> channel -> consumer
    a route exists between channels   message -> c1 -> ... -> cn -> consumer
    no route between channels         message -> channel -> consumer

Nothing is ever dropped for lack of a route.

This module also builds the graph of a single message (event, command
or query) with everything that produces or consumes it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..model.types import CollectionName, Entity, Reference
from ..resolve.index import (
    consumers_of_message,
    entity_consumers_of_message,
    entity_producers_of_message,
    matching_ref,
    producers_of_message,
    services_both_sending_and_receiving,
)
from .builder import GraphBuilder
from .chains import add_chains_for_message
from .labels import PUBLISHES_AND_SUBSCRIBES, ROUTES_TO, consumer_label, producer_label
from .layout import LayoutEngine
from .model import NodeGraph, node_id
from .snapshot import CatalogSnapshot

logger = logging.getLogger(__name__)


def declared_channels(record: Entity, field: str, message: Entity) -> list[Reference]:
    """Channels a record declares for a message it sends ("to") or receives ("from")."""
    ref = matching_ref(record, field, message)
    if ref is None:
        return []
    return list((ref.to if field == "sends" else ref.from_) or [])


def _resolved(snapshot: CatalogSnapshot, refs: Sequence[Reference]) -> list[Entity]:
    channels = []
    for ref in refs:
        channel = snapshot.find_channel(ref.id, ref.version)
        if channel is not None:
            channels.append(channel)
    return channels


def add_channel_chain(
    builder: GraphBuilder, message: Entity, chain: Sequence[Entity], consumer: Entity, label: str
) -> None:
    """Render message -> c1 -> ... -> cn -> consumer."""
    previous = node_id(message)
    for channel in chain:
        builder.add_node(channel)
        builder.add_edge(previous, channel, ROUTES_TO, color_key=message.id)
        previous = node_id(channel)
    builder.add_edge(previous, consumer, label, color_key=message.id, root=(message, consumer))


def connect_producer(
    builder: GraphBuilder,
    snapshot: CatalogSnapshot,
    message: Entity,
    producer: Entity,
    channels: Sequence[Reference],
    label: Optional[str] = None,
) -> list[Entity]:
    """Wire producer -> message and message -> each declared channel.

    Returns:
        The producer channels that resolved.
    """
    builder.add_node(producer)
    builder.add_edge(producer, message, label or producer_label(producer, message), color_key=message.id)
    resolved = _resolved(snapshot, channels)
    for channel in resolved:
        builder.add_node(channel)
        builder.add_edge(message, channel, ROUTES_TO, color_key=message.id)
    return resolved


def connect_consumer(
    builder: GraphBuilder,
    snapshot: CatalogSnapshot,
    message: Entity,
    consumer: Entity,
    channels: Sequence[Reference],
    producer_channels: Sequence[Entity],
    label: Optional[str] = None,
) -> None:
    """Wire message -> consumer through whatever channels the consumer declares."""
    builder.add_node(consumer)
    direct = label or consumer_label(consumer, message)
    if not channels:
        builder.add_edge(message, consumer, direct, color_key=message.id)
        return

    through = label or consumer_label(consumer, message, through_channel=True)
    for ref in channels:
        channel = snapshot.find_channel(ref.id, ref.version)
        if channel is None:
            logger.debug("Channel %s not found, connecting %s directly", ref.id, consumer.id)
            builder.add_edge(message, consumer, direct, color_key=message.id)
            continue

        chains = [
            chain
            for chain in (
                snapshot.channel_graph.get_channel_chain(producer_channel, channel)
                for producer_channel in producer_channels
            )
            if chain
        ]
        if chains:
            for chain in chains:
                add_channel_chain(builder, message, chain, consumer, through)
        else:
            builder.add_node(channel)
            builder.add_edge(message, channel, ROUTES_TO, color_key=message.id)
            builder.add_edge(channel, consumer, through, color_key=message.id)


def add_consumed_message(
    builder: GraphBuilder,
    snapshot: CatalogSnapshot,
    target: Entity,
    message: Entity,
    label: Optional[str] = None,
    expand_chains: bool = False,
) -> None:
    """A message the target receives, with the services and entities producing it.

    Args:
        builder: Graph accumulator
        snapshot: Loaded catalog
        target: Receiving record
        message: Message being received
        label: Label of the final edge into the target (default by kind)
        expand_chains: Also expand policy and view/actor chains
    """
    builder.add_node(message)
    builder.add_node(target)
    target_channels = declared_channels(target, "receives", message)

    producers = producers_of_message(snapshot.services, message) + [
        producer
        for producer in entity_producers_of_message(snapshot.entities, message)
        if not producer.same_as(target)
    ]

    if not producers and not target_channels:
        builder.add_edge(
            message, target, label or consumer_label(target, message), suffix="-warning", color_key=message.id
        )
    else:
        producer_channels: list[Entity] = []
        for producer in producers:
            producer_channels.extend(
                connect_producer(builder, snapshot, message, producer, declared_channels(producer, "sends", message))
            )
        connect_consumer(builder, snapshot, message, target, target_channels, producer_channels, label)

    if expand_chains:
        add_chains_for_message(builder, snapshot, message, focus=target)


def add_produced_message(
    builder: GraphBuilder,
    snapshot: CatalogSnapshot,
    source: Entity,
    message: Entity,
    label: Optional[str] = None,
    expand_chains: bool = False,
) -> None:
    """A message the source sends, with the latest services and the entities consuming it."""
    builder.add_node(message)
    source_channels = connect_producer(
        builder, snapshot, message, source, declared_channels(source, "sends", message), label
    )

    consumers = consumers_of_message(snapshot.latest_services, message) + [
        consumer
        for consumer in entity_consumers_of_message(snapshot.entities, message)
        if not consumer.same_as(source)
    ]
    for consumer in consumers:
        connect_consumer(
            builder, snapshot, message, consumer, declared_channels(consumer, "receives", message), source_channels
        )

    if expand_chains:
        add_chains_for_message(builder, snapshot, message, focus=source)


def build_message_graph(
    snapshot: CatalogSnapshot,
    entity_id: str,
    version: Optional[str] = None,
    mode: str = "simple",
    layout: Optional[LayoutEngine] = None,
    collection: Optional[CollectionName] = None,
) -> NodeGraph:
    """Graph of one message with its producers, consumers and chains."""
    if collection is not None:
        message = snapshot.find(collection, entity_id, version)
    else:
        message = snapshot.find_message(entity_id, version)
    if message is None:
        return NodeGraph.empty()

    builder = GraphBuilder(mode)
    builder.add_node(message)

    producer_channels: list[Entity] = []
    producers = producers_of_message(snapshot.services, message) + entity_producers_of_message(
        snapshot.entities, message
    )
    for producer in producers:
        producer_channels.extend(
            connect_producer(builder, snapshot, message, producer, declared_channels(producer, "sends", message))
        )

    consumers = consumers_of_message(snapshot.services, message) + entity_consumers_of_message(
        snapshot.entities, message
    )
    for consumer in consumers:
        connect_consumer(
            builder,
            snapshot,
            message,
            consumer,
            declared_channels(consumer, "receives", message),
            producer_channels,
        )

    for service in services_both_sending_and_receiving(snapshot.services, message):
        builder.add_edge(message, service, PUBLISHES_AND_SUBSCRIBES, suffix="-both", color_key=message.id)

    add_chains_for_message(builder, snapshot, message, focus=message)
    return builder.build(layout)
