"""
Node styles, edge labels and colors.

Every label the graph builders emit comes from here, keyed by the
collection of the records on each end.
"""

from __future__ import annotations

import hashlib

from ..model.types import CollectionName, Entity

C = CollectionName

# Collection -> (node type, key of the record payload in node data)
NODE_STYLES: dict[CollectionName, tuple[str, str]] = {
    C.ACTORS: ("actor", "actor"),
    C.VIEWS: ("view", "view"),
    C.POLICIES: ("policies", "policy"),
    C.ENTITIES: ("entities", "entity"),
    C.SERVICES: ("services", "service"),
    C.EVENTS: ("events", "message"),
    C.COMMANDS: ("commands", "message"),
    C.QUERIES: ("queries", "message"),
    C.CHANNELS: ("channels", "channel"),
    C.DOMAINS: ("domains", "domain"),
    C.FLOWS: ("flows", "flow"),
    C.CONTAINERS: ("data", "data"),
}

INFORMS = "informs"
ISSUES = "issues"
SUBSCRIBES = "subscribes"
SUBSCRIBES_TO = "subscribes to"
EMITS = "emits"
TRIGGERS = "triggers"
TRIGGERED_BY = "triggered by"
DISPATCHES = "dispatches"
HANDLES = "handles"
RECEIVES = "receives"
ROUTES_TO = "routes to"
PUBLISHES_AND_SUBSCRIBES = "publishes and subscribes"


def node_style(collection: CollectionName) -> tuple[str, str]:
    return NODE_STYLES.get(collection, (collection.value, collection.value))


def color_for(text: str) -> str:
    """Stable hex color derived from a string."""
    return "#" + hashlib.md5(text.encode("utf-8")).hexdigest()[:6]


def service_label_as_producer(message: Entity) -> str:
    """Label of a service -> message edge."""
    if message.collection == C.COMMANDS:
        return "invokes"
    if message.collection == C.EVENTS:
        return "publishes \nevent"
    if message.collection == C.QUERIES:
        return "requests"
    return "sends to"


def message_label_as_source(message: Entity, through_channel: bool = False) -> str:
    """Label of a message -> consuming service edge."""
    if message.collection == C.EVENTS:
        return "subscribed to" if through_channel else "subscribed by"
    if message.collection in (C.COMMANDS, C.QUERIES):
        return "accepts"
    return "sends to"


def entity_receive_label(message: Entity) -> str:
    """Label of the last edge into an entity receiving a message."""
    if message.collection == C.EVENTS:
        return SUBSCRIBES_TO
    return HANDLES


def policy_receive_label(message: Entity) -> str:
    """Label of the last edge into a focal policy."""
    if message.collection == C.EVENTS:
        return TRIGGERED_BY
    if message.collection in (C.COMMANDS, C.QUERIES):
        return HANDLES
    return RECEIVES


def producer_label(producer: Entity, message: Entity) -> str:
    if producer.collection == C.ENTITIES:
        return EMITS
    if producer.collection == C.POLICIES:
        return DISPATCHES
    return service_label_as_producer(message)


def consumer_label(consumer: Entity, message: Entity, through_channel: bool = False) -> str:
    if consumer.collection == C.ENTITIES:
        return SUBSCRIBES_TO
    if consumer.collection == C.POLICIES:
        return TRIGGERS
    return message_label_as_source(message, through_channel)
