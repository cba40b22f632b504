"""Commit records parsed from one-line ``git log`` output."""

from __future__ import annotations

import re
from dataclasses import dataclass

from rich.markup import escape

DEFAULT_HASH_WIDTH = 9

PR_RE = re.compile(r"#(?P<pr>\d+)")

# Commit types. "commit" is the only one that gets triaged.
COMMIT = "commit"
UI = "ui"
CHORE = "chore"
TAG = "tag"
IGNORED_TYPES = (UI, CHORE, TAG)


@dataclass(frozen=True)
class CommitRecord:
    """One line of a symmetric-difference listing and what we know about it.

    Records are rebuilt from ``git log`` on every run; only triage decisions
    outlive a run. ``pretty`` is rich markup for ``line`` whose style follows
    the classification.
    """

    line: str
    ref: str
    type: str = COMMIT  # "commit" | "ui" | "chore" | "tag"
    hash: str | None = None
    message: str | None = None
    pr: str | None = None
    pretty: str = ""

    def __post_init__(self):
        if not self.pretty:
            object.__setattr__(self, "pretty", escape(self.line))

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "ref": self.ref,
            "type": self.type,
            "hash": self.hash,
            "message": self.message,
            "pr": self.pr,
            "pretty": self.pretty,
        }

    @classmethod
    def from_dict(cls, d: dict) -> CommitRecord:
        return cls(
            line=d.get("line", ""),
            ref=d.get("ref", ""),
            type=d.get("type", COMMIT),
            hash=d.get("hash"),
            message=d.get("message"),
            pr=d.get("pr"),
            pretty=d.get("pretty", ""),
        )


def decorate(line: str, style: str) -> str:
    """Wrap ``line`` in rich markup for ``style`` (escaping any brackets in it)."""
    if not style:
        return escape(line)
    return f"[{style}]{escape(line)}[/]"


def _hash_re(width: int) -> re.Pattern:
    return re.compile(rf"(?<![0-9A-Za-z])(?P<hash>[0-9a-f]{{{width},40}})(?![0-9A-Za-z])")


def parse_commit(line: str, hash_width: int = DEFAULT_HASH_WIDTH) -> CommitRecord | None:
    """Parse a ``git log --oneline`` line into a commit record.

    Returns None when the line has no hash-shaped token; such lines are
    graph connectors or boundary markers, not commits.

    >>> parse_commit("abc123456 fix: notes formatting (#42)").pr
    '42'
    """
    match = _hash_re(hash_width).search(line)
    if match is None:
        return None

    message = line[match.end():].strip()
    pr_match = PR_RE.search(message)
    return CommitRecord(
        line=line,
        ref="",
        hash=match.group("hash"),
        message=message,
        pr=pr_match.group("pr") if pr_match else None,
    )


def sanitize_message(message: str) -> str:
    """Escape square brackets so a message can be used as a ``--grep`` pattern.

    ``fix: notes formatting [skip ci]`` would otherwise be read as a
    bracket expression and never match itself.
    """
    return message.replace("[", "\\[").replace("]", "\\]")
