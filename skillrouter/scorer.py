"""Scoring engine: BM25 over a SkillIndex plus result selection.

`BM25Scorer.score_all()` ranks every skill against a query;
`score_query()` applies the threshold, the max-results cap and the
always-include overrides on top of it.
"""

from __future__ import annotations

import math

from skillrouter.config import RouterConfig
from skillrouter.models import ScoringResult, SkillEntry, SkillIndex
from skillrouter.text import tokenize_query, unique_in_order

K1 = 1.2
B = 0.75

KEYWORD_WEIGHT = 2
TOKEN_WEIGHT = 1


# ── BM25 ────────────────────────────────────────────────────────────


class BM25Scorer:
    """BM25 with keyword-weighted term frequency.

    score(D, Q) = Σ IDF(q) · tf(q, D)·(k1 + 1) / (tf(q, D) + k1·(1 − b + b·|D|/avgdl))

    tf counts 2 for every keyword equal to or containing the term and 1 for
    every body token equal to it.
    """

    def __init__(self, index: SkillIndex, k1: float = K1, b: float = B):
        self.index = index
        self.k1 = k1
        self.b = b

    def idf(self, term: str) -> float:
        n_docs = len(self.index.skills)
        df = self.index.document_frequency.get(term, 0)
        if df == 0:
            return 0.0
        return math.log((n_docs - df + 0.5) / (df + 0.5) + 1.0)

    @staticmethod
    def term_frequency(skill: SkillEntry, term: str) -> int:
        # Substring containment on keywords lets "pull" hit "pull request".
        tf = sum(KEYWORD_WEIGHT for kw in skill.keywords if term in kw)
        tf += sum(TOKEN_WEIGHT for tok in skill.tokens if tok == term)
        return tf

    @staticmethod
    def doc_length(skill: SkillEntry) -> int:
        return len(skill.keywords) + len(skill.tokens)

    def score_skill(self, skill: SkillEntry, query_terms: list[str]) -> ScoringResult:
        avgdl = self.index.avg_doc_length
        length_ratio = self.doc_length(skill) / avgdl if avgdl else 1.0
        norm = self.k1 * (1 - self.b + self.b * length_ratio)

        score = 0.0
        matched: list[str] = []
        for term in query_terms:
            tf = self.term_frequency(skill, term)
            if tf == 0:
                continue
            matched.append(term)
            score += self.idf(term) * (tf * (self.k1 + 1)) / (tf + norm)

        return ScoringResult(
            skill=skill,
            score=score,
            matched_keywords=unique_in_order(matched),
        )

    def score_all(self, query: str) -> list[ScoringResult]:
        """Score every skill.  Returns results by score descending, ties in index order."""
        query_terms = tokenize_query(query)
        if not query_terms:
            return []

        results = [self.score_skill(skill, query_terms) for skill in self.index.skills]
        # sorted() is stable, also with reverse=True
        return sorted(results, key=lambda r: r.score, reverse=True)


# ── Result selection ────────────────────────────────────────────────


def score_query(
    index: SkillIndex,
    query: str,
    config: RouterConfig,
) -> list[ScoringResult]:
    """Always-include skills (index order) followed by the top-k scored skills."""
    scorer = BM25Scorer(index, config.bm25_k1, config.bm25_b)
    all_results = scorer.score_all(query)

    forced_names = set(config.always_include)
    always_skills = [
        s for s in index.skills if s.always_include or s.name in forced_names
    ]
    always_names = {s.name for s in always_skills}

    top_results = [
        r
        for r in all_results
        if r.score >= config.threshold and r.skill.name not in always_names
    ][: max(config.max_results, 0)]

    scored_by_name = {r.skill.name: r for r in all_results}
    always_results: list[ScoringResult] = []
    for skill in always_skills:
        existing = scored_by_name.get(skill.name)
        if existing is not None and existing.matched_keywords:
            always_results.append(existing)
        else:
            always_results.append(ScoringResult(skill=skill, score=0.0))

    return always_results + top_results
