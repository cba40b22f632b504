"""Triage orchestration: fetch → classify → prune → prompt.

One run compares a source branch with a destination branch (main → next,
next → release/*) and asks, for every commit the destination doesn't have
yet, whether it needs to be cherry picked. Answers go into the triage cache
as soon as they're given; persisting the cache is the caller's job.
"""

from __future__ import annotations

import logging
import webbrowser
from dataclasses import dataclass, field, replace
from typing import Callable

from rich.markup import escape

from branchtriage_core.classifier import DEFAULT_REF_STYLE, TriageContext, classify_lines
from branchtriage_core.commits import COMMIT, DEFAULT_HASH_WIDTH, CommitRecord, decorate
from branchtriage_core.gh.pull_request import PullRequestLinks
from branchtriage_core.git.log import (
    TRIAGE_LOG_OPTIONS,
    get_current_branch,
    get_release_branches,
    get_symmetric_difference,
    update_remotes,
)
from branchtriage_core.git.runner import CommandRunner
from branchtriage_core.render import (
    NEEDS_CHERRY_PICK_STYLE,
    NO_CHERRY_PICK_STYLE,
    UNTRIAGED_STYLE,
    console,
    log_section,
    render_commit_log,
    report_new_commits,
    triage_legend,
)

logger = logging.getLogger(__name__)

YES_ANSWERS = ("", "Y", "y")
OPEN_ANSWERS = ("o", "open")

# Outcome statuses.
SAME = "same"
UP_TO_DATE = "up-to-date"
TRIAGED = "triaged"


class PreconditionError(Exception):
    """The repository isn't in a state triage can run from."""


@dataclass
class TriageDirection:
    """A source → destination pair to triage, e.g. main → next."""

    name: str
    source_ref: str
    destination_ref: str
    open_cherry_picks: bool = False


@dataclass
class TriageOutcome:
    status: str  # "same" | "up-to-date" | "triaged"
    commits: list[CommitRecord] = field(default_factory=list)
    triaged: int = 0


def main_to_next(config: dict) -> TriageDirection:
    return TriageDirection(
        name="triage-main",
        source_ref=config["main_branch"],
        destination_ref=config["next_branch"],
        open_cherry_picks=True,
    )


def next_to_release(config: dict, release_branch: str) -> TriageDirection:
    return TriageDirection(name="triage-next", source_ref=config["next_branch"], destination_ref=release_branch)


def check_working_branch(runner: CommandRunner, expected: str | None) -> None:
    if not expected:
        return
    current = get_current_branch(runner)
    if current != expected:
        raise PreconditionError(f"Start from {expected} (currently on {current or 'a detached HEAD'})")


def resolve_release_branch(runner: CommandRunner, pattern: str = "release/*") -> str:
    """Return the one local release branch; zero or several is a precondition failure."""
    branches = get_release_branches(runner, pattern)
    if not branches:
        raise PreconditionError("There's no release branch")
    if len(branches) > 1:
        raise PreconditionError(f"There's more than one release branch: {', '.join(branches)}")
    return branches[0]


def is_yes(answer: str) -> bool:
    return answer in YES_ANSWERS


def is_triageable(commit: CommitRecord) -> bool:
    return commit.type == COMMIT


def color_by_decision(commits: list[CommitRecord], cache, destination: str) -> list[CommitRecord]:
    """Recolor commits still outside ``destination`` by what the cache says about them."""
    colored = []
    for commit in commits:
        if not is_triageable(commit) or commit.ref == destination:
            colored.append(commit)
            continue
        if not cache.has(commit.hash):
            style = UNTRIAGED_STYLE
        elif cache.get(commit.hash).needs_cherry_pick:
            style = NEEDS_CHERRY_PICK_STYLE
        else:
            style = NO_CHERRY_PICK_STYLE
        colored.append(replace(commit, pretty=decorate(commit.line, style)))
    return colored


def triage_commits(
    commits: list[CommitRecord],
    cache,
    destination: str,
    *,
    ask: Callable[[str], str] = console.input,
    open_url: Callable[[str], object] = webbrowser.open,
    links: PullRequestLinks | None = None,
) -> int:
    """Ask whether each commit needs cherry picking into ``destination``.

    ``ask`` receives rich markup and returns the raw answer. Returns the
    number of decisions recorded.
    """
    recorded = 0
    for commit in commits:
        question = (
            f"Does [dim]{commit.hash}[/dim] [cyan]{escape(commit.message or '')}[/cyan] need to be cherry picked "
            f"into [magenta]{escape(destination)}[/magenta]? {escape('[Y/n/o(pen)]')} > "
        )
        while True:
            answer = ask(question)

            if answer in OPEN_ANSWERS:
                url = links.pull(commit.pr) if links else None
                if url:
                    open_url(url)
                else:
                    console.print("There's no PR for this commit")
                continue

            cache.decide(commit.hash, commit.message or "", needs_cherry_pick=is_yes(answer))
            recorded += 1
            break
    return recorded


def run_triage(
    runner: CommandRunner,
    direction: TriageDirection,
    cache,
    *,
    refresh_remotes: bool = True,
    remote_refs: tuple[str, ...] = ("main", "next"),
    ask: Callable[[str], str] = console.input,
    open_url: Callable[[str], object] = webbrowser.open,
    links: PullRequestLinks | None = None,
    hash_width: int = DEFAULT_HASH_WIDTH,
) -> TriageOutcome:
    source, destination = direction.source_ref, direction.destination_ref
    context = TriageContext(source_ref=source, destination_refs=[destination])

    if refresh_remotes:
        log_section("Updating remotes")
        update_remotes(runner, list(remote_refs))

    log_section(f"Getting symmetric difference between {source} and {destination}")
    lines = get_symmetric_difference(runner, source, destination, TRIAGE_LOG_OPTIONS)

    if lines == [""]:
        console.print(f"The {source} and {destination} branches are the same")
        cache.clear()
        return TriageOutcome(status=SAME)

    commits = classify_lines(runner, lines, context, hash_width)
    candidates = [c for c in commits if is_triageable(c)]

    log_section("Purging commit data")
    cache.prune(candidates, destination)

    # Drop commits already triaged, and ones cherry picked under a changed hash.
    candidates = [c for c in candidates if not cache.has(c.hash) and c.ref != destination]

    if not candidates:
        log_section("Showing color-coded git log")
        console.print("No new commits to triage")
        console.print(triage_legend(destination, DEFAULT_REF_STYLE))
        commits = color_by_decision(commits, cache, destination)
        render_commit_log(commits)
        return TriageOutcome(status=UP_TO_DATE, commits=commits)

    log_section("Triage")
    if direction.open_cherry_picks and links is not None:
        for url in links.cherry_picks():
            open_url(url)
        console.print()

    report_new_commits(candidates, source, destination)
    console.print()
    triaged = triage_commits(candidates, cache, destination, ask=ask, open_url=open_url, links=links)
    logger.debug("Recorded %d triage decision(s) for %s", triaged, direction.name)
    return TriageOutcome(status=TRIAGED, commits=commits, triaged=triaged)
