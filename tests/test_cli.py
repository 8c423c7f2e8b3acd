"""Tests for the command-line interface."""

from datetime import datetime, timedelta, timezone

import pytest
from click.testing import CliRunner

from conftest import make_marker
from leaderlens.catalog.workspace import load_config, open_store
from leaderlens.cli.main import cli
from leaderlens.models.topics import TopicAnalysis, TopicShare
from leaderlens.utils.io import read_json


@pytest.fixture
def catalog(tmp_path):
    path = tmp_path / "catalog.yaml"
    result = CliRunner().invoke(cli, ["-c", str(path), "init", "--name", "Test"])
    assert result.exit_code == 0, result.output
    return path


def run(catalog, *args):
    return CliRunner().invoke(cli, ["-c", str(catalog), *args])


def _store(catalog):
    return open_store(catalog, load_config(catalog))


class TestInit:
    def test_creates_config_and_store(self, catalog):
        config = load_config(catalog)

        assert config.name == "Test"
        assert (catalog.parent / "store" / "leaders").is_dir()

    def test_refuses_to_overwrite(self, catalog):
        assert run(catalog, "init").exit_code == 1
        assert run(catalog, "init", "--force").exit_code == 0

    def test_missing_catalog(self, tmp_path):
        assert run(tmp_path / "nope.yaml", "leader", "list").exit_code == 1


class TestLeaderCommands:
    def test_add_list_show(self, catalog):
        added = run(catalog, "leader", "add", "ada", "--video", "https://v", "--transcript", "t.txt")
        assert added.exit_code == 0

        listed = run(catalog, "leader", "list")
        assert listed.exit_code == 0
        assert "ada" in listed.output

        assert run(catalog, "leader", "show", "ada").exit_code == 0
        assert run(catalog, "leader", "show", "bo").exit_code == 1

    def test_list_search_matches_name_or_title(self, catalog):
        run(catalog, "leader", "add", "Ada Lovelace", "--video", "https://v", "--transcript", "a.txt",
            "--title", "Analyst")
        run(catalog, "leader", "add", "Grace Hopper", "--video", "https://v", "--transcript", "g.txt",
            "--title", "Compiler Builder")

        by_title = run(catalog, "leader", "list", "--search", "BUILD")
        assert by_title.exit_code == 0
        assert "Grace Hopper" in by_title.output
        assert "Ada Lovelace" not in by_title.output

        by_name = run(catalog, "leader", "list", "-s", "lovelace")
        assert "Ada Lovelace" in by_name.output
        assert "Grace Hopper" not in by_name.output

        assert "No leaders match" in run(catalog, "leader", "list", "--search", "zzz").output

    def test_show_prints_chapter_spans(self, catalog):
        run(catalog, "leader", "add", "ada", "--video", "https://v", "--transcript", "t.txt")
        _store(catalog).append_version("ada", [], [
            make_marker("Start", timestamp="00:00:00"),
            make_marker("Middle", timestamp="00:05:07"),
            make_marker("End", timestamp="01:02:03"),
        ])

        result = run(catalog, "leader", "show", "ada", "--no-qa")

        assert result.exit_code == 0
        assert "00:00 - 05:07 Start" in result.output
        assert "05:07 - 01:02:03 Middle" in result.output
        assert "01:02:03 End" in result.output

    def test_duplicate_add_fails(self, catalog):
        args = ("leader", "add", "ada", "--video", "https://v", "--transcript", "t.txt")
        run(catalog, *args)

        assert run(catalog, *args).exit_code == 1


class TestVersionCommands:
    def test_default_and_delete(self, catalog):
        run(catalog, "leader", "add", "ada", "--video", "https://v", "--transcript", "t.txt")
        store = _store(catalog)
        store.append_version("ada", [], [])
        store.append_version("ada", [], [])

        assert run(catalog, "versions", "list", "ada").exit_code == 0
        assert run(catalog, "versions", "default", "ada", "0").exit_code == 0
        assert store.get("ada").latest_analysis_version == "v1"

        assert run(catalog, "versions", "delete", "ada", "5").exit_code == 1
        assert run(catalog, "versions", "delete", "ada", "0").exit_code == 0
        assert store.get("ada").latest_analysis_version == "v2"


class TestAnalyticsCommands:
    def _seed(self, catalog):
        store = _store(catalog)
        for name, themes in [("ada", ["Passion", "Risk"]), ("bo", ["Passion", "Risk"])]:
            store.create_leader(name, "https://v", "t.txt")
            store.append_version(name, [], [make_marker(themes=themes)])

    def test_themes_table(self, catalog):
        self._seed(catalog)

        result = run(catalog, "themes", "--sort", "alphabetical")

        assert result.exit_code == 0
        assert "Passion" in result.output

    def test_network_layout_written(self, catalog, tmp_path):
        self._seed(catalog)
        out = tmp_path / "network.json"

        result = run(catalog, "network", "--threshold", "2", "--out", str(out))

        assert result.exit_code == 0
        data = read_json(out)
        assert {n["id"] for n in data["nodes"]} == {"Passion", "Risk"}
        assert len(data["links"]) == 1

    def test_network_empty_is_not_an_error(self, catalog, tmp_path):
        self._seed(catalog)
        out = tmp_path / "network.json"

        result = run(catalog, "network", "--threshold", "5", "--out", str(out))

        assert result.exit_code == 0
        assert not out.exists()

    def test_chart_needs_analysis(self, catalog, tmp_path):
        assert run(catalog, "topics", "chart", "--out", str(tmp_path / "pie.json")).exit_code == 1

    def test_zero_max_age_forces_regeneration(self, catalog, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        _store(catalog).save_topic_analysis(TopicAnalysis(
            topic_distribution=[TopicShare(topic="Risk", percentage=100)],
            generated_at=datetime.now(timezone.utc) - timedelta(hours=1),
        ))

        cached = run(catalog, "topics", "analyze")
        assert cached.exit_code == 0
        assert "Risk" in cached.output

        # stale at zero hours, and regeneration has no corpus to work from
        assert run(catalog, "topics", "analyze", "--max-age-hours", "0").exit_code == 1
