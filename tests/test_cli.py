"""CLI tests: build → status → match through typer's test runner."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from router import app

runner = CliRunner()


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Isolate HOME and point the index/context paths into tmp_path."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("SKILL_ROUTER_INDEX_PATH", str(tmp_path / "index.json"))
    monkeypatch.setenv("SKILL_ROUTER_CONTEXT_PATH", str(tmp_path / "context.md"))
    monkeypatch.setenv("SKILL_ROUTER_ALWAYS_INCLUDE", "")
    for name in ("SKILL_ROUTER_MAX_RESULTS", "SKILL_ROUTER_THRESHOLD", "SKILL_ROUTER_BM25_K1",
                 "SKILL_ROUTER_BM25_B", "SKILL_ROUTER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _build(skills_dir):
    return runner.invoke(app, ["build", "--paths", str(skills_dir)])


class TestBuild:
    def test_writes_index(self, env, skills_dir):
        result = _build(skills_dir)
        assert result.exit_code == 0, result.output
        data = json.loads((env / "index.json").read_text())
        assert len(data["skills"]) == 4
        assert "github-pr" in result.output

    def test_no_skills_found(self, env, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["build", "--paths", str(empty)])
        assert result.exit_code == 0
        assert "No skills found" in result.output
        assert not (env / "index.json").exists()

    def test_existing_index_requires_force(self, env, skills_dir):
        assert _build(skills_dir).exit_code == 0
        before = (env / "index.json").read_text()

        result = _build(skills_dir)
        assert result.exit_code == 0
        assert "--force" in result.output
        assert (env / "index.json").read_text() == before

        result = runner.invoke(app, ["build", "--force", "--paths", str(skills_dir)])
        assert result.exit_code == 0
        assert (env / "index.json").read_text() != before

    def test_output_option(self, env, skills_dir):
        out = env / "custom" / "idx.json"
        result = runner.invoke(app, ["build", "-o", str(out), "-p", str(skills_dir)])
        assert result.exit_code == 0
        assert out.exists()


class TestMatch:
    def test_json_output(self, env, skills_dir):
        _build(skills_dir)
        result = runner.invoke(app, ["match", "create a github pull request", "--json"])
        assert result.exit_code == 0, result.output

        payload = json.loads(result.stdout)
        assert payload["query"] == "create a github pull request"
        names = [r["name"] for r in payload["results"]]
        assert names[0] == "skill-router"
        assert names[1] == "github-pr"
        assert "database" not in names
        assert "github" in payload["results"][1]["matchedKeywords"]

        context = (env / "context.md").read_text()
        assert "<available_skills>" in context
        assert "github-pr" in context

    def test_table_output(self, env, skills_dir):
        _build(skills_dir)
        result = runner.invoke(app, ["match", "make a git commit"])
        assert result.exit_code == 0, result.output
        assert "git-commit" in result.output
        assert "Context written to" in result.output

    def test_max_results_override(self, env, skills_dir):
        _build(skills_dir)
        result = runner.invoke(
            app, ["match", "git github code", "-n", "1", "-t", "0", "--json"]
        )
        assert result.exit_code == 0, result.output
        scored = [r for r in json.loads(result.stdout)["results"] if r["name"] != "skill-router"]
        assert len(scored) == 1

    def test_missing_index(self, env):
        result = runner.invoke(app, ["match", "anything"])
        assert result.exit_code == 1
        assert "index not found" in result.output

    def test_invalid_config(self, env, skills_dir):
        _build(skills_dir)
        result = runner.invoke(app, ["match", "anything", "--max-results", "0"])
        assert result.exit_code == 1
        assert "max_results" in result.output


class TestStatus:
    def test_missing_index_json(self, env):
        result = runner.invoke(app, ["status", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["status"] == "missing"

    def test_reports_statistics(self, env, skills_dir):
        _build(skills_dir)
        result = runner.invoke(app, ["status", "--json"])
        assert result.exit_code == 0, result.output
        stats = json.loads(result.stdout)
        assert stats["status"] == "ok"
        assert stats["skillCount"] == 4
        assert stats["alwaysIncludeSkills"] == ["skill-router"]
        assert stats["config"]["maxResults"] == 3

    def test_table_output(self, env, skills_dir):
        _build(skills_dir)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0, result.output
        assert "Index OK" in result.output
        assert "database" in result.output
