"""Release commit summary: which commits on the release branch are new in this release."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from rich.markup import escape

from branchtriage_core.classifier import TriageContext, classify_lines
from branchtriage_core.commits import COMMIT, DEFAULT_HASH_WIDTH, CommitRecord
from branchtriage_core.git.log import (
    RELEASE_LOG_OPTIONS,
    get_latest_release,
    get_symmetric_difference,
    list_patch_tags,
)
from branchtriage_core.git.runner import CommandRunner
from branchtriage_core.render import SWATCH, color_key, console, log_section, render_commit_log

logger = logging.getLogger(__name__)

# Patch tags are looked up for this many minors below the release branch's.
PATCH_MINOR_OFFSET = 2


@dataclass
class ReleaseCommits:
    commits: list[CommitRecord] = field(default_factory=list)
    tags_to_colors: dict[str, str] = field(default_factory=dict)
    release_commits: list[CommitRecord] = field(default_factory=list)

    @property
    def no_release_commits(self) -> int:
        return len(self.release_commits)

    def to_dict(self) -> dict:
        return {
            "commits": [c.to_dict() for c in self.commits],
            "tagsToColors": dict(self.tags_to_colors),
            "releaseCommits": [c.to_dict() for c in self.release_commits],
            "noReleaseCommits": self.no_release_commits,
        }

    @classmethod
    def from_dict(cls, d: dict) -> ReleaseCommits:
        return cls(
            commits=[CommitRecord.from_dict(c) for c in d.get("commits", [])],
            tags_to_colors=dict(d.get("tagsToColors", {})),
            release_commits=[CommitRecord.from_dict(c) for c in d.get("releaseCommits", [])],
        )


def parse_release_version(release_branch: str) -> tuple[str, int]:
    """Split ``release/minor/v3.6.0`` into ``('v3', 6)``."""
    version = release_branch.rsplit("/", 1)[-1]
    parts = version.split(".")
    if len(parts) < 2 or not parts[1].isdigit():
        raise ValueError(f"Can't read a version from release branch {release_branch!r}")
    return parts[0], int(parts[1])


def assign_tag_colors(tags: list[str], seed: int) -> dict[str, str]:
    """Give each tag a hex color. Same seed, same colors across runs."""
    rng = random.Random(seed)
    return {tag: "#{:02x}{:02x}{:02x}".format(*(rng.randint(64, 255) for _ in range(3))) for tag in tags}


def collect_release_commits(
    runner: CommandRunner,
    release_branch: str,
    hash_width: int = DEFAULT_HASH_WIDTH,
) -> ReleaseCommits:
    major, minor = parse_release_version(release_branch)

    log_section("Getting the release branch and the last release")
    latest_release = get_latest_release(runner)
    if not latest_release:
        raise ValueError("There's no release tag to compare the release branch with")
    console.print(f"{escape(release_branch)} vs {escape(latest_release)}")

    log_section(f"Getting the symmetric difference between {release_branch} and {latest_release}")
    lines = get_symmetric_difference(runner, release_branch, latest_release, RELEASE_LOG_OPTIONS)

    log_section(f"Checking if any of the commits in {release_branch} were in a minor or patch release")
    patch_minor = minor - PATCH_MINOR_OFFSET
    patches = list_patch_tags(runner, major, patch_minor) if patch_minor >= 0 else []
    tags = [*patches, latest_release]
    tags_to_colors = assign_tag_colors(tags, seed=minor)

    context = TriageContext(source_ref=release_branch, destination_refs=tags, ref_colors=tags_to_colors)
    commits = classify_lines(runner, lines, context, hash_width) if lines != [""] else []
    release_commits = [c for c in commits if c.ref == release_branch and c.type == COMMIT]
    logger.debug("%d of %d lines are release commits", len(release_commits), len(commits))

    return ReleaseCommits(commits=commits, tags_to_colors=tags_to_colors, release_commits=release_commits)


def get_release_commits(
    runner: CommandRunner,
    release_branch: str,
    cache,
    use_cache: bool = True,
    hash_width: int = DEFAULT_HASH_WIDTH,
) -> ReleaseCommits:
    """Return the release summary, reusing the cached one when allowed."""
    if use_cache and cache.exists():
        data = cache.load()
        if data is not None:
            return ReleaseCommits.from_dict(data)

    result = collect_release_commits(runner, release_branch, hash_width)
    cache.save(result.to_dict())
    return result


def render_release_commits(result: ReleaseCommits) -> None:
    console.print(f"[yellow]{result.no_release_commits}[/yellow] commits in this release")
    key = [
        f"[dim {color}]{SWATCH}[/] Cherry picked into [dim {color}]{escape(tag)}[/]"
        for tag, color in result.tags_to_colors.items()
    ]
    key.append(f"[dim]{SWATCH}[/] UI, chore, or tag (ignore)")
    console.print(color_key(key))
    render_commit_log(result.commits)
