from __future__ import annotations

import logging

from branchtriage_core.git.runner import CommandRunner, git

logger = logging.getLogger(__name__)

SHARED_LOG_OPTIONS = [
    "--oneline",
    "--no-abbrev-commit",
    "--left-right",
    "--graph",
]

# main → next and next → release: only what the left ref has, minus
# patch-equivalent commits, plus the boundary commits for context.
TRIAGE_LOG_OPTIONS = [*SHARED_LOG_OPTIONS, "--left-only", "--cherry-pick", "--boundary"]

# Release summary: keep both sides but mark patch-equivalent commits.
RELEASE_LOG_OPTIONS = [*SHARED_LOG_OPTIONS, "--cherry-mark"]


def get_current_branch(runner: CommandRunner) -> str:
    return git(runner, "branch", "--show-current").strip()


def get_release_branches(runner: CommandRunner, pattern: str = "release/*") -> list[str]:
    """Return local branches matching ``pattern``, e.g. ``['release/minor/v3.6.0']``."""
    output = git(runner, "branch", "--list", pattern)
    return [line.lstrip("*+ ").strip() for line in output.splitlines() if line.strip()]


def get_latest_release(runner: CommandRunner) -> str:
    """Return the highest ``vX.Y.Z`` tag by version sort, or '' when there is none."""
    output = git(runner, "tag", "--sort=-version:refname", "--list", "v?.?.?").strip()
    return output.splitlines()[0].strip() if output else ""


def list_patch_tags(runner: CommandRunner, major: str, minor: int) -> list[str]:
    """Return the patch releases (``vM.m.1`` and up) of one minor version."""
    output = git(runner, "tag", "-l", f"{major}.{minor}.[!0]").strip()
    return [tag.strip() for tag in output.splitlines() if tag.strip()]


def get_commit_message(runner: CommandRunner, commit_hash: str) -> str:
    """Return the subject line of a single commit."""
    return git(runner, "log", "--format=%s", "-n", "1", commit_hash).strip()


def is_commit_in_ref(runner: CommandRunner, ref: str, pattern: str) -> bool:
    """Return True if ``ref``'s history has a commit whose message matches ``pattern``.

    Relies on commit messages being left alone when cherry picking. Pass the
    message through ``sanitize_message`` first.
    """
    return bool(git(runner, "log", ref, "--oneline", "--grep", pattern).strip())


def get_symmetric_difference(runner: CommandRunner, left_ref: str, right_ref: str, options: list[str]) -> list[str]:
    """Return the ``git log`` lines for commits in either ref but not both.

    Commits only in the left ref are prefixed with ``<``, commits only in the
    right ref with ``>``. Lines come back in git's order. No divergence gives
    ``['']`` rather than ``[]``.
    """
    output = git(runner, "log", *options, f"{left_ref}...{right_ref}")
    return output.strip().split("\n")


def origin_has_commits(runner: CommandRunner, ref: str) -> bool:
    """Return True if the local ``ref`` and ``origin/ref`` differ."""
    count = git(runner, "rev-list", f"{ref}...origin/{ref}", "--count").strip()
    return int(count or 0) > 0


def update_remotes(runner: CommandRunner, refs: list[str]) -> None:
    """Update remotes and fast-forward the local copies of ``refs`` that are behind."""
    git(runner, "remote", "update")
    for ref in refs:
        if origin_has_commits(runner, ref):
            logger.info("Fetching origin/%s into %s", ref, ref)
            git(runner, "fetch", "origin", f"{ref}:{ref}")


def get_remote_url(runner: CommandRunner, remote: str = "origin") -> str | None:
    result = runner.run(["git", "remote", "get-url", remote])
    if result.exit_code != 0:
        return None
    return result.stdout.strip() or None
