"""JSON snapshot storage for the skill index.

One file per index, rewritten wholesale on every build.  All I/O is
synchronous; a snapshot is small enough to load fully for each query.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from skillrouter.models import SkillIndex

logger = logging.getLogger(__name__)


class IndexStore:
    def __init__(self, index_path: str | Path):
        self.index_path = Path(index_path)

    def exists(self) -> bool:
        return self.index_path.is_file()

    def save(self, index: SkillIndex) -> None:
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(
            json.dumps(index.to_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.debug("Saved index with %d skill(s) to %s", len(index.skills), self.index_path)

    def load(self) -> SkillIndex | None:
        """Read the snapshot back.  Returns None if it is absent or unusable."""
        if not self.exists():
            return None
        try:
            data = json.loads(self.index_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Could not read index at %s: %s", self.index_path, e)
            return None

        try:
            return SkillIndex.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed index at %s: %s", self.index_path, e)
            return None

    def delete(self) -> bool:
        if not self.exists():
            return False
        self.index_path.unlink()
        return True
