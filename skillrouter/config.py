"""Router configuration: defaults, environment overrides, validation.

The core never reads the environment itself; the CLI resolves a
RouterConfig here and passes it into `score_query`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

ENV_PREFIX = "SKILL_ROUTER_"

DEFAULT_ALWAYS_INCLUDE = ("skill-router",)
CONTEXT_FILE_NAME = ".skill-router-context.md"
INDEX_FILE_NAME = ".skill-router-index.json"


@dataclass
class RouterConfig:
    max_results: int = 3
    threshold: float = 0.3
    bm25_k1: float = 1.2
    bm25_b: float = 0.75
    always_include: list[str] = field(
        default_factory=lambda: list(DEFAULT_ALWAYS_INCLUDE)
    )
    context_file_path: str = CONTEXT_FILE_NAME
    index_path: str = INDEX_FILE_NAME

    def to_dict(self) -> dict:
        return {
            "maxResults": self.max_results,
            "threshold": self.threshold,
            "bm25K1": self.bm25_k1,
            "bm25B": self.bm25_b,
            "alwaysInclude": list(self.always_include),
        }


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name, "").strip()
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name, "").strip()
    try:
        return float(raw)
    except ValueError:
        return default


def get_config(environ: Mapping[str, str] | None = None) -> RouterConfig:
    """Build a RouterConfig from SKILL_ROUTER_* variables over the defaults."""
    env = os.environ if environ is None else environ
    defaults = RouterConfig()

    always_raw = env.get(ENV_PREFIX + "ALWAYS_INCLUDE")
    if always_raw is not None:
        always_include = [s.strip() for s in always_raw.split(",") if s.strip()]
    else:
        always_include = defaults.always_include

    return RouterConfig(
        max_results=_env_int(env, "MAX_RESULTS", defaults.max_results),
        threshold=_env_float(env, "THRESHOLD", defaults.threshold),
        bm25_k1=_env_float(env, "BM25_K1", defaults.bm25_k1),
        bm25_b=_env_float(env, "BM25_B", defaults.bm25_b),
        always_include=always_include,
        context_file_path=env.get(ENV_PREFIX + "CONTEXT_PATH") or get_default_context_path(),
        index_path=env.get(ENV_PREFIX + "INDEX_PATH") or get_default_index_path(),
    )


def get_skill_directories() -> list[str]:
    """Standard skill roots in priority order (first occurrence of a name wins)."""
    home = Path.home()
    return [
        str(home / ".openclaw" / "workspace" / "skills"),
        str(home / ".openclaw" / "managed-skills"),
    ]


def get_default_index_path() -> str:
    return str(Path.home() / ".openclaw" / INDEX_FILE_NAME)


def get_default_context_path() -> str:
    return str(Path.cwd() / CONTEXT_FILE_NAME)


# ── Validation ──────────────────────────────────────────────────────

def validate_config(config: RouterConfig) -> list[str]:
    """Check value ranges.  Returns list of error strings."""
    errors: list[str] = []

    if not isinstance(config.max_results, int) or config.max_results < 1:
        errors.append("'max_results' must be a positive integer.")

    if not isinstance(config.threshold, (int, float)) or config.threshold < 0:
        errors.append("'threshold' must be a non-negative number.")

    if not isinstance(config.bm25_k1, (int, float)) or config.bm25_k1 < 0:
        errors.append("'bm25_k1' must be a non-negative number.")

    b = config.bm25_b
    if not isinstance(b, (int, float)) or b < 0 or b > 1:
        errors.append("'bm25_b' must be a number between 0 and 1.")

    if not isinstance(config.always_include, list) or not all(
        isinstance(name, str) for name in config.always_include
    ):
        errors.append("'always_include' must be a list of skill names.")

    return errors
