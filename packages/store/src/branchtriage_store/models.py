"""Triage cache data models.

Decoupled from branchtriage_core so the store can be used on its own and
core has no knowledge of the on-disk format.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TriageDecision:
    """A human's answer to "does this commit need to be cherry picked?"."""

    message: str
    needs_cherry_pick: bool

    def to_dict(self) -> dict:
        return {"message": self.message, "needsCherryPick": self.needs_cherry_pick}

    @classmethod
    def from_dict(cls, d: dict) -> TriageDecision:
        return cls(message=d.get("message", ""), needs_cherry_pick=bool(d.get("needsCherryPick", False)))
