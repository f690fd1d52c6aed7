"""Tests for the CLI commands that don't touch the network."""

import json

import pytest
from typer.testing import CliRunner

from energy_events.cli import app

runner = CliRunner()


@pytest.fixture
def local_paths(tmp_path, monkeypatch):
    monkeypatch.setattr("energy_events.indexers.json_store.EVENTS_STORE_PATH", tmp_path / "events.json")
    monkeypatch.setattr("energy_events.indexers.json_store.SUBSCRIPTIONS_PATH", tmp_path / "subs.json")
    return tmp_path


class TestCli:
    """Tests for typer commands."""

    def test_unknown_source(self):
        result = runner.invoke(app, ["scrape", "--source", "no-such-source"])
        assert result.exit_code == 1

    def test_subscribe_and_remove(self, local_paths):
        result = runner.invoke(app, ["subscribe", "Reader@Example.org"])
        assert result.exit_code == 0
        data = json.loads((local_paths / "subs.json").read_text())
        assert data["subscriptions"][0]["email"] == "reader@example.org"

        result = runner.invoke(app, ["subscribe", "reader@example.org", "--remove"])
        assert result.exit_code == 0

        result = runner.invoke(app, ["subscribe", "nobody@example.org", "--remove"])
        assert result.exit_code == 1

    def test_subscribe_invalid(self, local_paths):
        assert runner.invoke(app, ["subscribe", "not-an-email"]).exit_code == 1

    def test_stats_json_backend(self, local_paths):
        result = runner.invoke(app, ["stats", "--backend", "json"])
        assert result.exit_code == 0
        assert "Records: 0" in result.output

    def test_unknown_backend(self, local_paths):
        assert runner.invoke(app, ["stats", "--backend", "postgres"]).exit_code == 1

    def test_clear_requires_confirmation(self, local_paths):
        result = runner.invoke(app, ["clear", "--backend", "json"], input="n\n")
        assert result.exit_code != 0

    def test_scrape_explain_shows_keywords(self, monkeypatch, make_event):
        async def fake_run_all(configs, **kwargs):
            return [make_event("Solar Summit", description="Community solar and grid planning")]

        monkeypatch.setattr("energy_events.cli.run_all", fake_run_all)
        result = runner.invoke(app, ["scrape", "--no-save", "--explain"])
        assert result.exit_code == 0
        assert "Relevance keywords" in result.output
        assert "solar" in result.output

        result = runner.invoke(app, ["scrape", "--no-save"])
        assert result.exit_code == 0
        assert "Relevance keywords" not in result.output
