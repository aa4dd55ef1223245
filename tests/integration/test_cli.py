"""
Integration tests for the command line interface.
"""

import json

import pytest

from catalog.eventgraph.tools import catalog_cli
from catalog.eventgraph.tools.catalog_cli import run
from tests.catalog_fixtures import policy_catalog, record, ref, source_of


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, tmp_path):
    """Keep the CLI from reconfiguring logging or scanning the working directory."""
    monkeypatch.setattr(catalog_cli, "setup_logging", lambda settings, stream=None: None)
    monkeypatch.setenv("EVENTGRAPH_PROJECT_DIR", str(tmp_path))


class TestCatalogCLI:
    """Tests for the eventgraph command."""

    def test_graph(self, capsys):
        code = run(["graph", "policy", "OrderPolicy", "1.0.0", "--no-layout"], source=source_of(policy_catalog()))

        assert code == 0
        graph = json.loads(capsys.readouterr().out)
        labels = {edge["id"]: edge["label"] for edge in graph["edges"]}
        assert labels["OrderCreated-1.0.0-OrderPolicy-1.0.0"] == "triggered by"
        assert labels["OrderPolicy-1.0.0-ProcessOrder-1.0.0"] == "dispatches"

    def test_graph_defaults_to_latest(self, capsys):
        code = run(["graph", "policies", "OrderPolicy"], source=source_of(policy_catalog()))

        assert code == 0
        graph = json.loads(capsys.readouterr().out)
        assert "OrderPolicy-1.0.0" in {node["id"] for node in graph["nodes"]}

    def test_unknown_kind_exit_code(self, capsys):
        code = run(["graph", "flows", "Checkout"], source=source_of(policy_catalog()))

        assert code == 2
        assert "Unsupported graph kind" in capsys.readouterr().err

    def test_list_current(self, capsys):
        code = run(["list", "policies", "--current"], source=source_of(policy_catalog()))

        assert code == 0
        items = json.loads(capsys.readouterr().out)
        assert [(i["data"]["id"], i["data"]["version"]) for i in items] == [
            ("ChannelPolicy", "1.0.0"),
            ("OrderPolicy", "1.0.0"),
            ("SimplePolicy", "1.0.0"),
        ]
        order_policy = items[1]
        assert [d["id"] for d in order_policy["data"]["domains"]] == ["OrderDomain"]

    def test_list_unknown_collection(self, capsys):
        assert run(["list", "widgets"], source=source_of(policy_catalog())) == 2

    def test_export(self, capsys):
        code = run(["export"], source=source_of(policy_catalog()))

        assert code == 0
        out = capsys.readouterr().out
        assert "## Policies" in out
        assert "- Orders Domain" in out

    def test_check_clean(self, capsys):
        assert run(["check", "--strict"], source=source_of(policy_catalog())) == 0
        assert "All references resolve" in capsys.readouterr().out

    def test_check_broken(self, capsys):
        records = policy_catalog() + [record("actors", "Clerk", "1.0.0", reads=[ref("MissingView", "1.0.0")])]

        assert run(["check"], source=source_of(records)) == 0
        assert "MissingView" in capsys.readouterr().out

        assert run(["check", "--strict"], source=source_of(records)) == 1
        assert "1 broken reference(s) found" in capsys.readouterr().out
