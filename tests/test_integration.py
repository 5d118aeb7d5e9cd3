"""End-to-end routing: scan → build → save → load → score → write context."""

from __future__ import annotations

import pytest

from skillrouter.config import RouterConfig
from skillrouter.indexer import build_index_from_directories
from skillrouter.injector import read_context_file, write_context_file
from skillrouter.scorer import score_query
from skillrouter.store import IndexStore


@pytest.fixture
def loaded_index(skills_dir, tmp_path):
    index = build_index_from_directories([str(skills_dir)], roots=[])
    store = IndexStore(tmp_path / "index.json")
    store.save(index)
    loaded = store.load()
    assert loaded == index
    return loaded


def _config(**overrides) -> RouterConfig:
    defaults = dict(max_results=3, threshold=0.1, always_include=[])
    defaults.update(overrides)
    return RouterConfig(**defaults)


class TestRoutingFlow:
    def test_github_query(self, loaded_index):
        results = score_query(loaded_index, "create a github pull request", _config())
        scored = [r for r in results if not r.skill.always_include]
        assert scored[0].skill.name == "github-pr"
        assert scored[0].score > 0
        assert "github" in scored[0].matched_keywords
        assert all(r.skill.name != "database" for r in results)

    def test_commit_query(self, loaded_index):
        results = score_query(loaded_index, "make a git commit", _config())
        commit = next(r for r in results if r.skill.name == "git-commit")
        assert commit.score > 0

    def test_always_include_from_metadata(self, loaded_index):
        results = score_query(loaded_index, "random unrelated query xyz", _config(threshold=0.5))
        router = next(r for r in results if r.skill.name == "skill-router")
        assert router.score == 0
        assert router.matched_keywords == []

    def test_empty_query_returns_only_always_include(self, loaded_index):
        results = score_query(loaded_index, "", _config())
        assert [r.skill.name for r in results] == ["skill-router"]

    def test_respects_max_results(self, loaded_index):
        results = score_query(loaded_index, "git github code", _config(max_results=1, threshold=0.0))
        assert len([r for r in results if not r.skill.always_include]) == 1

    def test_writes_context_file(self, loaded_index, tmp_path):
        results = score_query(loaded_index, "create github pr", _config())
        path = tmp_path / ".skill-router-context.md"
        write_context_file(results, path, query="create github pr")

        content = read_context_file(path)
        assert "github-pr" in content
        assert "<available_skills>" in content
        assert "SKILL.md" in content
