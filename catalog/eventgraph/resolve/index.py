"""
Relationship index: who points at a record.

Every query here is a reverse lookup over a loaded collection, sharing a
single matching rule: a pointer matches a record when the ids are equal
and the pointer either names no version, names "latest", or names a
version/range the record's version satisfies.

Queries are pure functions of their inputs and return records in input
order.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..model.types import Entity, Reference
from ..model.versions import LATEST, satisfies


def reference_matches(ref: Reference, target: Entity) -> bool:
    if ref.id != target.id:
        return False
    if ref.version is None or ref.version == LATEST:
        return True
    return satisfies(target.version, ref.version)


def references(entity: Entity, field: str, target: Entity) -> bool:
    """True when any pointer in entity.<field> matches target."""
    return any(reference_matches(ref, target) for ref in entity.refs(field))


def referencing(candidates: Iterable[Entity], field: str, target: Entity) -> list[Entity]:
    return [candidate for candidate in candidates if references(candidate, field, target)]


def matching_ref(entity: Entity, field: str, target: Entity) -> Optional[Reference]:
    """First pointer in entity.<field> that matches target."""
    for ref in entity.refs(field):
        if reference_matches(ref, target):
            return ref
    return None


# Services and entities around messages


def producers_of_message(services: Iterable[Entity], message: Entity) -> list[Entity]:
    return referencing(services, "sends", message)


def consumers_of_message(services: Iterable[Entity], message: Entity) -> list[Entity]:
    return referencing(services, "receives", message)


def entity_producers_of_message(entities: Iterable[Entity], message: Entity) -> list[Entity]:
    return referencing(entities, "sends", message)


def entity_consumers_of_message(entities: Iterable[Entity], message: Entity) -> list[Entity]:
    return referencing(entities, "receives", message)


def services_both_sending_and_receiving(services: Iterable[Entity], message: Entity) -> list[Entity]:
    return [
        service
        for service in services
        if references(service, "sends", message) and references(service, "receives", message)
    ]


# Policies


def policies_triggered_by_event(policies: Iterable[Entity], event: Entity) -> list[Entity]:
    return referencing(policies, "receives", event)


def policies_dispatching_command(policies: Iterable[Entity], command: Entity) -> list[Entity]:
    return referencing(policies, "sends", command)


# Views and actors


def views_subscribed_to_event(views: Iterable[Entity], event: Entity) -> list[Entity]:
    return referencing(views, "subscribes", event)


def views_informing_actor(views: Iterable[Entity], actor: Entity) -> list[Entity]:
    return referencing(views, "informs", actor)


def actors_reading_view(actors: Iterable[Entity], view: Entity) -> list[Entity]:
    return referencing(actors, "reads", view)


def actors_issuing_command(actors: Iterable[Entity], command: Entity) -> list[Entity]:
    return referencing(actors, "issues", command)
