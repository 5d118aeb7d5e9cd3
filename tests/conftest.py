"""Shared fixtures: on-disk skill trees and in-memory indexes."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillrouter.indexer import build_index
from skillrouter.models import SkillEntry

SKILLS = {
    "github-pr": """---
name: github-pr
description: Creates and manages GitHub pull requests
tools: Bash
---

# GitHub PR Skill

Use this skill to create, review, and manage pull requests.

## Keywords

github, pr, pull request, merge, code review
""",
    "git-commit": """---
name: git-commit
description: Creates well-formatted git commits
tools: Bash
---

# Git Commit Skill

Use this skill to create commits with proper messages.

## Keywords

git, commit, message, staging
""",
    "database": """---
name: database
description: Database operations and queries
tools: Bash
---

# Database Skill

SQL and database management.

## Keywords

sql, database, query, postgres
""",
    "skill-router": """---
name: skill-router
description: Routes messages to appropriate skills
tools: Bash
metadata:
  openclaw:
    always: true
---

# Skill Router

Always included.
""",
}


def write_skill(root: Path, dirname: str, text: str) -> Path:
    skill_dir = root / dirname
    skill_dir.mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(text, encoding="utf-8")
    return skill_dir


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    root = tmp_path / "skills"
    root.mkdir()
    for dirname, text in SKILLS.items():
        write_skill(root, dirname, text)
    return root


def make_skill(name: str, keywords=(), tokens=(), always_include: bool = False) -> SkillEntry:
    return SkillEntry(
        name=name,
        description=f"{name} skill",
        location=f"/path/to/{name}",
        keywords=list(keywords),
        tokens=list(tokens),
        always_include=always_include,
    )


@pytest.fixture
def small_index():
    """github-pr / git-commit / database corpus built from explicit keywords."""
    return build_index([
        make_skill("github-pr", keywords=["github", "pr", "pull", "request"]),
        make_skill("git-commit", keywords=["git", "commit", "message"]),
        make_skill("database", keywords=["database", "sql"]),
    ])
