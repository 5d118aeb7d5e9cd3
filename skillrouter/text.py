"""Shared text preprocessing for indexer and scorer.

Both sides must tokenize identically, otherwise a query term never lines
up with the indexed term it was meant to hit.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

STOP_WORDS = frozenset(
    "a an and are as at be by can do for from has have he her his how i if in "
    "is it its just may me my no not of on or our out own say she so some than "
    "that the their them then there these they this those through to too up us "
    "use very was we were what when where which while who why will with would "
    "you your".split()
    # generic documentation words
    + ["example", "see", "note", "using", "used", "uses"]
)

MIN_TOKEN_LENGTH = 2

_NON_TERM_CHARS = re.compile(r"[^a-z0-9\s-]")

# "## Keywords" up to the next level-2 heading or end of text.
_KEYWORDS_SECTION = re.compile(
    r"^[ ]{0,3}##[ \t]*keywords?[ \t]*(?:\n|\Z)(.*?)(?=^[ ]{0,3}##|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)
_BULLET = re.compile(r"^[-*][ \t]+(.+)$", re.MULTILINE)


def unique_in_order(items: Iterable[str]) -> list[str]:
    """Drop repeats, keeping the first occurrence of each item."""
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def tokenize(text: str) -> list[str]:
    """Lowercase → strip punctuation (keep hyphens) → split → drop short and stop words."""
    cleaned = _NON_TERM_CHARS.sub(" ", text.lower())
    return [
        t
        for t in cleaned.split()
        if len(t) >= MIN_TOKEN_LENGTH and t not in STOP_WORDS
    ]


def tokenize_query(message: str) -> list[str]:
    return tokenize(message)


def extract_unique_tokens(text: str) -> list[str]:
    return unique_in_order(tokenize(text))


def _clean_keyword(raw: str) -> str | None:
    keyword = raw.strip().lower()
    return keyword if len(keyword) >= MIN_TOKEN_LENGTH else None


def extract_keywords_section(content: str) -> list[str]:
    """Pull author-curated keywords out of a ``## Keywords`` markdown section.

    Accepts a comma-separated line, a ``-``/``*`` bullet list, or both.
    Returns an empty list when the section is absent.
    """
    match = _KEYWORDS_SECTION.search(content)
    if not match:
        return []

    block = match.group(1).strip()
    keywords: list[str] = []

    if "\n" not in block or "," in block:
        for part in block.split(","):
            keyword = _clean_keyword(part)
            if keyword:
                keywords.append(keyword)

    for bullet in _BULLET.finditer(block):
        keyword = _clean_keyword(bullet.group(1))
        if keyword:
            keywords.append(keyword)

    return unique_in_order(keywords)


def extract_keywords(description: str, content: str) -> list[str]:
    """Explicit keywords first, then description tokens as a fallback signal."""
    return unique_in_order(
        extract_keywords_section(content) + extract_unique_tokens(description)
    )
