"""Commit classification.

Each line of a symmetric-difference listing is classified on its own, first
match wins:

  1. graph UI (``|\\``, `` /``, boundary ``o`` ...)  -> type "ui"
  2. maintenance commit (merge into next, lockfile)  -> type "chore"
  3. annotated release tag (``v3.6.0``)              -> type "tag", ref = tag
  4. destination-ref scan                            -> ref = last matching ref

Steps 2-4 need the commit's message, which costs one ``git log`` per line;
step 4 costs one more per destination ref. UI lines cost nothing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Iterable

from branchtriage_core.commits import (
    CHORE,
    DEFAULT_HASH_WIDTH,
    PR_RE,
    TAG,
    UI,
    CommitRecord,
    decorate,
    parse_commit,
    sanitize_message,
)
from branchtriage_core.git.log import get_commit_message, is_commit_in_ref
from branchtriage_core.git.runner import CommandRunner

logger = logging.getLogger(__name__)

# Prefixes `git log --graph` draws that carry no commit.
GRAPH_MARKS = ("o", " /", "|\\", "| o", "|\\|")

_MERGE_INTO_NEXT_RE = re.compile(r"Merge branch (?P<branch>.*) into next")

CHORE_MESSAGES = (
    "update yarn.lock",
    "Version docs",
    "update all contributors",
)

RELEASE_TAG_RE = re.compile(r"^v\d+\.\d+\.\d+$")

IGNORED_STYLE = "dim"
DEFAULT_REF_STYLE = "dim blue"


@dataclass
class TriageContext:
    """What a classification or triage pass compares against.

    ``ref_colors`` maps a destination ref to a rich color (``"#aabbcc"``);
    refs without one are shown dim blue.
    """

    source_ref: str
    destination_refs: list[str]
    ref_colors: dict[str, str] = field(default_factory=dict)

    def style_for(self, ref: str) -> str:
        color = self.ref_colors.get(ref)
        return f"dim {color}" if color else DEFAULT_REF_STYLE


def is_line_ui(line: str) -> bool:
    return line.startswith(GRAPH_MARKS)


def is_commit_chore(message: str) -> bool:
    """Return True for merge and housekeeping commits that never need triage.

    >>> is_commit_chore("chore: update yarn.lock")
    True
    """
    if _MERGE_INTO_NEXT_RE.search(message):
        return True
    return any(chore in message for chore in CHORE_MESSAGES)


def is_release_tag(message: str) -> bool:
    return bool(RELEASE_TAG_RE.match(message))


def classify_line(
    runner: CommandRunner,
    line: str,
    context: TriageContext,
    hash_width: int = DEFAULT_HASH_WIDTH,
) -> CommitRecord:
    """Classify one log line and return a new CommitRecord."""
    commit = CommitRecord(line=line, ref=context.source_ref)

    if is_line_ui(line):
        return replace(commit, type=UI, pretty=decorate(line, IGNORED_STYLE))

    parsed = parse_commit(line, hash_width)
    if parsed is None:
        # Graph art we don't have a mark for. Nothing to triage either way.
        logger.debug("No commit hash in line %r; treating it as UI", line)
        return replace(commit, type=UI, pretty=decorate(line, IGNORED_STYLE))

    message = get_commit_message(runner, parsed.hash)
    pr_match = PR_RE.search(message)
    commit = replace(commit, hash=parsed.hash, message=message, pr=pr_match.group("pr") if pr_match else None)

    if is_commit_chore(message):
        return replace(commit, type=CHORE, pretty=decorate(line, IGNORED_STYLE))

    if is_release_tag(message):
        return replace(commit, type=TAG, ref=message, pretty=decorate(line, IGNORED_STYLE))

    pattern = sanitize_message(message)
    for ref in context.destination_refs:
        # No early break: when several refs match, the last one wins.
        if is_commit_in_ref(runner, ref, pattern):
            commit = replace(commit, ref=ref, pretty=decorate(line, context.style_for(ref)))

    return commit


def classify_lines(
    runner: CommandRunner,
    lines: Iterable[str],
    context: TriageContext,
    hash_width: int = DEFAULT_HASH_WIDTH,
) -> list[CommitRecord]:
    """Classify lines in order, one at a time."""
    return [classify_line(runner, line, context, hash_width) for line in lines]
