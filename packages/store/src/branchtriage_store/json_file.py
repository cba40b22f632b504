"""JsonTriageCache — triage decisions in a flat JSON file.

Format: ``{"<hash>": {"message": str, "needsCherryPick": bool}, ...}``.

The file is an optimisation (don't ask twice), not a source of truth, so a
missing or corrupt file just means starting fresh. One interactive process
owns the file at a time; concurrent runs against the same file are not
guarded against and the last one to exit wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from branchtriage_store.base import BaseTriageCache
from branchtriage_store.models import TriageDecision

logger = logging.getLogger(__name__)


class JsonTriageCache(BaseTriageCache):
    def __init__(self, path: str | Path, decisions: dict[str, TriageDecision] | None = None):
        self.path = Path(path)
        self._decisions: dict[str, TriageDecision] = dict(decisions or {})

    @classmethod
    def load(cls, path: str | Path) -> JsonTriageCache:
        """Read the cache at ``path``. Never raises; bad files yield an empty cache."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls(path)
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable triage cache %s: %s", path, e)
            return cls(path)

        if not isinstance(data, dict):
            logger.debug("Ignoring triage cache %s: top level is %s, not an object", path, type(data).__name__)
            return cls(path)

        decisions = {h: TriageDecision.from_dict(d) for h, d in data.items() if isinstance(d, dict)}
        return cls(path, decisions)

    def get(self, commit_hash: str) -> TriageDecision | None:
        return self._decisions.get(commit_hash)

    def set(self, commit_hash: str, decision: TriageDecision) -> None:
        self._decisions[commit_hash] = decision

    def delete(self, commit_hash: str) -> None:
        self._decisions.pop(commit_hash, None)

    def keys(self) -> list[str]:
        return list(self._decisions)

    def clear(self) -> None:
        self._decisions.clear()

    def to_dict(self) -> dict:
        return {h: d.to_dict() for h, d in self._decisions.items()}

    def persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
        logger.debug("Wrote %d triage decision(s) to %s", len(self._decisions), self.path)
