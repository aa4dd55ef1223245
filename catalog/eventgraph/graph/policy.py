"""
Policy graph: what triggers a policy and what it dispatches.

Inbound messages are wired with their producers (channel-aware) and the
final edge into the policy reads "triggered by" for events; outbound
messages are wired with their consumers and the edge out of the policy
reads "dispatches".
"""

from __future__ import annotations

from typing import Optional

from ..model.types import CollectionName
from .builder import GraphBuilder
from .labels import DISPATCHES, policy_receive_label
from .layout import LayoutEngine
from .messages import add_consumed_message, add_produced_message
from .model import NodeGraph
from .snapshot import CatalogSnapshot


def build_policy_graph(
    snapshot: CatalogSnapshot,
    entity_id: str,
    version: Optional[str] = None,
    mode: str = "simple",
    layout: Optional[LayoutEngine] = None,
) -> NodeGraph:
    policy = snapshot.find(CollectionName.POLICIES, entity_id, version)
    if policy is None:
        return NodeGraph.empty()

    builder = GraphBuilder(mode)
    builder.add_node(policy)

    for ref in policy.refs("receives"):
        message = snapshot.find(CollectionName.EVENTS, ref.id, ref.version)
        if message is None:
            continue
        add_consumed_message(builder, snapshot, policy, message, label=policy_receive_label(message))

    for ref in policy.refs("sends"):
        message = snapshot.find(CollectionName.COMMANDS, ref.id, ref.version)
        if message is None:
            continue
        add_produced_message(builder, snapshot, policy, message, label=DISPATCHES)

    return builder.build(layout)
