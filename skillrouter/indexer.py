"""Indexer: reads SKILL.md files, extracts keywords and tokens, and builds
the BM25 statistics (document frequency, average document length).
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import yaml

from skillrouter import INDEX_VERSION
from skillrouter.config import get_skill_directories
from skillrouter.models import SkillEntry, SkillIndex, parse_tools
from skillrouter.text import extract_keywords, extract_unique_tokens

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"

_FRONTMATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.DOTALL)


@dataclass
class ParsedSkill:
    frontmatter: dict
    content: str


# ── Parsing ─────────────────────────────────────────────────────────

def _split_frontmatter(raw: str) -> tuple[str, str]:
    match = _FRONTMATTER.match(raw)
    if not match:
        return "", raw
    return match.group(1), match.group(2)


def parse_skill_file(file_path: str | Path) -> ParsedSkill | None:
    """Parse a SKILL.md into frontmatter + body.

    Returns None when the file cannot be read or lacks a name/description;
    such skills are not indexable and are skipped by the scanner.
    """
    path = Path(file_path)
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping %s: %s", path, e)
        return None

    header, content = _split_frontmatter(raw)
    try:
        frontmatter = yaml.safe_load(header) if header else {}
    except yaml.YAMLError as e:
        logger.debug("Skipping %s: invalid frontmatter: %s", path, e)
        return None

    if not isinstance(frontmatter, dict):
        logger.debug("Skipping %s: frontmatter is not a mapping", path)
        return None
    if not frontmatter.get("name") or not frontmatter.get("description"):
        logger.debug("Skipping %s: missing name or description", path)
        return None

    return ParsedSkill(frontmatter=frontmatter, content=content)


def _always_flag(frontmatter: dict) -> bool:
    metadata = frontmatter.get("metadata") or {}
    openclaw = metadata.get("openclaw") if isinstance(metadata, dict) else None
    if not isinstance(openclaw, dict):
        return False
    return bool(openclaw.get("always", False))


def skill_from_parsed(parsed: ParsedSkill, location: str) -> SkillEntry:
    fm = parsed.frontmatter
    description = str(fm["description"])
    return SkillEntry(
        name=str(fm["name"]),
        description=description,
        location=location,
        keywords=extract_keywords(description, parsed.content),
        tokens=extract_unique_tokens(parsed.content),
        tools=parse_tools(fm.get("tools")),
        always_include=_always_flag(fm),
    )


# ── Scanning ────────────────────────────────────────────────────────

def scan_skill_directory(base_path: str | Path) -> list[SkillEntry]:
    """Collect skills from the immediate subdirectories of base_path."""
    base = Path(base_path)
    if not base.is_dir():
        return []

    skills: list[SkillEntry] = []
    try:
        for skill_dir in sorted(base.iterdir()):
            skill_file = skill_dir / SKILL_FILE
            if not skill_dir.is_dir() or not skill_file.is_file():
                continue
            parsed = parse_skill_file(skill_file)
            if parsed is None:
                continue
            skills.append(skill_from_parsed(parsed, str(skill_dir.resolve())))
    except OSError as e:
        logger.debug("Could not read %s: %s", base, e)

    logger.debug("Scanned %s: %d skill(s)", base, len(skills))
    return skills


def scan_all_skill_directories(
    additional_paths: Sequence[str] = (),
    roots: Sequence[str] | None = None,
) -> list[SkillEntry]:
    """Scan roots in priority order; the first skill seen under a name wins."""
    directories = list(get_skill_directories() if roots is None else roots)
    directories.extend(additional_paths)

    skills: list[SkillEntry] = []
    seen_names: set[str] = set()
    for directory in directories:
        for skill in scan_skill_directory(directory):
            if skill.name in seen_names:
                logger.debug("Shadowed duplicate skill %r at %s", skill.name, skill.location)
                continue
            seen_names.add(skill.name)
            skills.append(skill)
    return skills


# ── BM25 Index Building ────────────────────────────────────────────

def calculate_document_frequency(skills: Sequence[SkillEntry]) -> dict[str, int]:
    """Count, per term, how many skills contain it at least once."""
    doc_freq: Counter[str] = Counter()
    for skill in skills:
        doc_freq.update(set(skill.keywords) | set(skill.tokens))
    return dict(doc_freq)


def calculate_avg_doc_length(skills: Sequence[SkillEntry]) -> float:
    if not skills:
        return 0.0
    total = sum(len(s.keywords) + len(s.tokens) for s in skills)
    return total / len(skills)


def build_index(skills: Sequence[SkillEntry]) -> SkillIndex:
    """Build a SkillIndex over an already-resolved list of skills."""
    skills = list(skills)
    index = SkillIndex(
        version=INDEX_VERSION,
        generated=datetime.now(timezone.utc).isoformat(),
        skills=skills,
        document_frequency=calculate_document_frequency(skills),
        avg_doc_length=calculate_avg_doc_length(skills),
    )
    logger.debug(
        "Built index: %d skill(s), %d unique term(s), avg length %.1f",
        len(skills),
        len(index.document_frequency),
        index.avg_doc_length,
    )
    return index


def build_index_from_directories(
    additional_paths: Sequence[str] = (),
    roots: Sequence[str] | None = None,
) -> SkillIndex:
    return build_index(scan_all_skill_directories(additional_paths, roots))
