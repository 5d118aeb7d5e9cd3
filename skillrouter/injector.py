"""Context file writer: renders matched skills for the agent to read.

The file is markdown with an embedded ``<available_skills>`` XML block
and a list of SKILL.md paths to open next.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

from skillrouter.indexer import SKILL_FILE
from skillrouter.models import ScoringResult

logger = logging.getLogger(__name__)

NO_MATCH_MESSAGE = "No skills matched this message."


def format_skills_as_xml(results: Sequence[ScoringResult]) -> str:
    if not results:
        return f"<available_skills>\n  <!-- {NO_MATCH_MESSAGE} -->\n</available_skills>"

    lines = ["<available_skills>"]
    for r in results:
        attrs = f"name={quoteattr(r.skill.name)}"
        if r.score > 0:
            attrs += f' score="{r.score:.2f}"'
        if r.matched_keywords:
            attrs += f" matched={quoteattr(', '.join(r.matched_keywords))}"
        lines.append(f"  <skill {attrs}>")
        lines.append(f"    <description>{escape(r.skill.description)}</description>")
        lines.append(f"    <location>{escape(r.skill.location)}</location>")
        lines.append("  </skill>")
    lines.append("</available_skills>")
    return "\n".join(lines)


def generate_context_content(
    results: Sequence[ScoringResult],
    query: str | None = None,
) -> str:
    generated = datetime.now(timezone.utc).isoformat()
    parts = ["# SkillRouter Context", "", f"Generated: {generated}"]
    if query is not None:
        parts.append(f"Query: {query}")

    if not results:
        parts += [
            "",
            f"{NO_MATCH_MESSAGE} Proceed with general assistance.",
            "",
        ]
        return "\n".join(parts)

    parts += [
        f"Matched: {', '.join(r.skill.name for r in results)}",
        "",
        format_skills_as_xml(results),
        "",
        "## Next steps",
        "",
        "Read the SKILL.md file of each relevant skill before acting:",
    ]
    parts += [f"- {Path(r.skill.location) / SKILL_FILE}" for r in results]
    parts.append("")
    return "\n".join(parts)


def write_context_file(
    results: Sequence[ScoringResult],
    file_path: str | Path,
    query: str | None = None,
) -> None:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_context_content(results, query), encoding="utf-8")
    logger.debug("Wrote context for %d skill(s) to %s", len(results), path)


def read_context_file(file_path: str | Path) -> str | None:
    path = Path(file_path)
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def cleanup_context_file(file_path: str | Path) -> bool:
    path = Path(file_path)
    if not path.is_file():
        return False
    path.unlink()
    return True
