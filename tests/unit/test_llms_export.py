"""
Unit tests for the llms.txt export.
"""

import pytest

from catalog.eventgraph.config import Settings
from catalog.eventgraph.export.llms import build_llms_txt, render_llms_txt
from catalog.eventgraph.model.types import CollectionName
from tests.catalog_fixtures import record, ref, source_of


def _collections():
    return {
        CollectionName.EVENTS: [
            record("events", "OrderCreated", "1.0.0", name="Order Created", summary="An order was placed"),
            record("events", "Secret", "1.0.0", hidden=True),
        ],
        CollectionName.CHANNELS: [record("channels", "orders", "1.0.0", protocols=["kafka", "http"])],
        CollectionName.DOMAINS: [
            record(
                "domains",
                "Orders",
                "1.0.0",
                name="Orders",
                views=[ref("OrderSummary"), ref("Ghost")],
                policies=[ref("OrderPolicy", "1.0.0")],
            )
        ],
        CollectionName.VIEWS: [record("views", "OrderSummary", "1.0.0", name="Order Summary", summary="Read model")],
        CollectionName.POLICIES: [record("policies", "OrderPolicy", "1.0.0", name="Order Policy")],
        CollectionName.ACTORS: [record("actors", "Agent", "1.0.0", name="Agent", summary="Support")],
        CollectionName.TEAMS: [record("teams", "platform", "1.0.0", name="Platform Team")],
    }


class TestRenderLlmsTxt:
    """Tests for render_llms_txt."""

    def test_header_and_sections(self):
        text = render_llms_txt(_collections(), "https://docs.example.com/", "Acme", "Events at Acme")

        assert text.startswith("# Acme EventCatalog Documentation\n")
        assert "> Events at Acme" in text
        for section in ("## Events", "## Commands", "## Entities", "## Policies", "## Views", "## Actors", "## Users"):
            assert section in text

    def test_versioned_item(self):
        text = render_llms_txt(_collections(), "https://docs.example.com")

        assert (
            "- [Order Created - OrderCreated - 1.0.0](https://docs.example.com/docs/events/OrderCreated/1.0.0.mdx)"
            " - An order was placed"
        ) in text
        assert "Secret" not in text

    def test_channel_protocols(self):
        text = render_llms_txt(_collections(), "")
        assert "- [orders - orders - 1.0.0 - protocol - kafka&protocol - http](/docs/channels/orders/1.0.0.mdx)" in text

    def test_domain_grouping_skips_unknown(self):
        text = render_llms_txt(_collections(), "")

        assert "- Orders Domain\n    - [Order Summary](/docs/views/OrderSummary/1.0.0.mdx) - Read model" in text
        assert "- Orders Domain\n    - [Order Policy](/docs/policies/OrderPolicy/1.0.0.mdx)" in text
        assert "Ghost" not in text

    def test_flat_lists(self):
        text = render_llms_txt(_collections(), "")

        assert "- [Agent](/docs/actors/Agent/1.0.0.mdx) - Support" in text
        assert "- [platform](/docs/teams/platform.mdx) - Platform Team" in text

    @pytest.mark.asyncio
    async def test_build_from_source(self):
        records = [item for items in _collections().values() for item in items]
        settings = Settings(public_base_url="https://x.test", organization_name="Acme")

        text = await build_llms_txt(source_of(records), settings)

        assert text.startswith("# Acme EventCatalog Documentation")
        assert "https://x.test/docs/events/OrderCreated/1.0.0.mdx" in text
