"""Value types shared by the indexer, scorer and store.

Field names in `to_dict()` are the snapshot contract (camelCase), so an
index written by one build can be read back by any later version that
shares INDEX_VERSION.
"""

from __future__ import annotations

from dataclasses import dataclass, field


def parse_tools(value) -> list[str] | None:
    """Normalize a tools value: comma-separated string or list of names."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return [t.strip() for t in items if t.strip()]


@dataclass
class SkillEntry:
    name: str
    description: str
    location: str
    keywords: list[str] = field(default_factory=list)
    tokens: list[str] = field(default_factory=list)
    tools: list[str] | None = None
    always_include: bool = False

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "keywords": list(self.keywords),
            "tokens": list(self.tokens),
        }
        if self.tools is not None:
            data["tools"] = list(self.tools)
        if self.always_include:
            data["alwaysInclude"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict) -> SkillEntry:
        return cls(
            name=data["name"],
            description=data["description"],
            location=data["location"],
            keywords=list(data.get("keywords", [])),
            tokens=list(data.get("tokens", [])),
            tools=parse_tools(data.get("tools")),
            always_include=bool(data.get("alwaysInclude", False)),
        )


@dataclass
class SkillIndex:
    version: int
    generated: str
    skills: list[SkillEntry]
    document_frequency: dict[str, int]
    avg_doc_length: float

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "generated": self.generated,
            "skills": [s.to_dict() for s in self.skills],
            "documentFrequency": dict(self.document_frequency),
            "avgDocLength": self.avg_doc_length,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SkillIndex:
        return cls(
            version=int(data["version"]),
            generated=str(data["generated"]),
            skills=[SkillEntry.from_dict(s) for s in data["skills"]],
            document_frequency={
                term: int(df) for term, df in data["documentFrequency"].items()
            },
            avg_doc_length=float(data["avgDocLength"]),
        )


@dataclass
class ScoringResult:
    skill: SkillEntry
    score: float
    matched_keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.skill.name,
            "score": round(self.score, 6),
            "matchedKeywords": list(self.matched_keywords),
            "location": self.skill.location,
        }
