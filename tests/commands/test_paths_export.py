"""Tests for the paths and export commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from corpusctl.cli import cli


@pytest.mark.usefixtures("_isolated_corpus", "auth_corpus")
class TestPathsCommand:
    def test_valid_paths(self, cli_runner: CliRunner, corpus_root: Path) -> None:
        step = {"phase": "develop", "topic": "sessions", "depth": "surface"}
        (corpus_root / "learning-paths" / "p.json").write_text(json.dumps({"steps": [step]}))
        result = cli_runner.invoke(cli, ["paths"])
        assert result.exit_code == 0
        assert "valid: 1" in result.stdout

    def test_missing_reference(self, cli_runner: CliRunner, corpus_root: Path) -> None:
        step = {"phase": "develop", "topic": "oauth", "depth": "deep-water"}
        (corpus_root / "learning-paths" / "p.json").write_text(json.dumps({"steps": [step]}))
        result = cli_runner.invoke(cli, ["paths"])
        assert result.exit_code == 1
        assert (
            "learning-paths/p.json: steps[0]: missing content: develop/oauth/deep-water"
            in result.stderr.splitlines()
        )


@pytest.mark.usefixtures("_isolated_corpus")
class TestExportCommand:
    @pytest.mark.usefixtures("auth_corpus")
    def test_json_manifest(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "export"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 4
        assert {e["kind"] for e in data["edges"]} == {"prerequisite", "related"}

    @pytest.mark.usefixtures("auth_corpus")
    def test_human_summary(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["export"])
        assert result.exit_code == 0
        assert "documents: 4" in result.stdout

    def test_refuses_failed_build(self, cli_runner: CliRunner, write_doc) -> None:
        write_doc("A", "develop", "auth", "surface", related_topics=["ghost"])
        result = cli_runner.invoke(cli, ["export"])
        assert result.exit_code == 4
        assert "Refusing to export" in result.stderr
        assert "develop/auth/surface/index.md: related_topics: unresolved reference 'ghost'" in (
            result.stderr
        )
