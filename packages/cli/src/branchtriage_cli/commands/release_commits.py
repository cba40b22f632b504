"""get-release-commits command — summarise what's in the release branch."""

from __future__ import annotations

import click

from branchtriage_core.config import cache_path
from branchtriage_core.git.runner import GitError
from branchtriage_core.release import get_release_commits, render_release_commits
from branchtriage_core.render import log_section
from branchtriage_store.release_cache import ReleaseCommitsCache


@click.command("get-release-commits")
@click.option(
    "--cache/--no-cache",
    "use_cache",
    default=True,
    show_default=True,
    help="Use the cached summary if it exists.",
)
@click.pass_context
def release_commits_cmd(ctx, use_cache: bool):
    """Get release commits.

    Compares the release branch with the latest release tag and colors each
    commit by the patch release it was cherry picked into, if any.
    """
    config = ctx.obj["config"]
    cache = ReleaseCommitsCache(cache_path(config, "release-commits"))

    try:
        result = get_release_commits(
            ctx.obj["runner"],
            ctx.obj["release_branch"],
            cache,
            use_cache=use_cache,
            hash_width=config["hash_width"],
        )
    except (GitError, ValueError) as e:
        raise click.ClickException(str(e))

    if not use_cache:
        log_section("Print")
    render_release_commits(result)
