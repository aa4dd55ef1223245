"""
Resolution helpers: hydration, reverse relationship lookups and channel routes.
"""

from .channels import ChannelGraph, get_channel_chain, is_channels_connected
from .hydrate import hydrate, resolve_ref
from .index import (
    actors_issuing_command,
    actors_reading_view,
    consumers_of_message,
    entity_consumers_of_message,
    entity_producers_of_message,
    matching_ref,
    policies_dispatching_command,
    policies_triggered_by_event,
    producers_of_message,
    reference_matches,
    references,
    referencing,
    services_both_sending_and_receiving,
    views_informing_actor,
    views_subscribed_to_event,
)

__all__ = [
    "ChannelGraph",
    "actors_issuing_command",
    "actors_reading_view",
    "consumers_of_message",
    "entity_consumers_of_message",
    "entity_producers_of_message",
    "get_channel_chain",
    "hydrate",
    "is_channels_connected",
    "matching_ref",
    "policies_dispatching_command",
    "policies_triggered_by_event",
    "producers_of_message",
    "reference_matches",
    "references",
    "referencing",
    "resolve_ref",
    "services_both_sending_and_receiving",
    "views_informing_actor",
    "views_subscribed_to_event",
]
