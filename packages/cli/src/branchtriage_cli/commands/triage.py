"""triage-main / triage-next commands — ask which commits need cherry picking."""

from __future__ import annotations

import click

from branchtriage_core.config import cache_path
from branchtriage_core.gh.pull_request import PullRequestLinks, parse_repo_slug
from branchtriage_core.git.log import get_remote_url
from branchtriage_core.git.runner import GitError
from branchtriage_core.triage import TriageDirection, main_to_next, next_to_release, run_triage
from branchtriage_store.json_file import JsonTriageCache

_update_remotes_option = click.option(
    "--update-remotes/--no-update-remotes",
    "update_remotes",
    default=True,
    show_default=True,
    help="Run `git remote update` and fast-forward main and next first.",
)


def _build_links(config: dict, runner) -> PullRequestLinks:
    """PR links for the configured repo, falling back to the origin remote."""
    from branchtriage_cli.auth import resolve_github_token

    slug = config.get("github_repo") or parse_repo_slug(get_remote_url(runner))
    token = config.get("github_token") or resolve_github_token()
    return PullRequestLinks(slug, token=token, label=config["cherry_pick_label"])


def _run(ctx: click.Context, direction: TriageDirection, update_remotes: bool) -> None:
    config = ctx.obj["config"]
    runner = ctx.obj["runner"]

    cache = JsonTriageCache.load(cache_path(config, direction.name))
    # Flushed however the command ends, including Ctrl-C at a prompt.
    ctx.call_on_close(cache.persist)

    try:
        run_triage(
            runner,
            direction,
            cache,
            refresh_remotes=update_remotes,
            remote_refs=(config["main_branch"], config["next_branch"]),
            open_url=click.launch,
            links=_build_links(config, runner),
            hash_width=config["hash_width"],
        )
    except GitError as e:
        raise click.ClickException(str(e))


@click.command("triage-main")
@_update_remotes_option
@click.pass_context
def triage_main_cmd(ctx, update_remotes: bool):
    """Triage commits from main to next."""
    _run(ctx, main_to_next(ctx.obj["config"]), update_remotes)


@click.command("triage-next")
@_update_remotes_option
@click.pass_context
def triage_next_cmd(ctx, update_remotes: bool):
    """Triage commits from next to the release branch."""
    _run(ctx, next_to_release(ctx.obj["config"], ctx.obj["release_branch"]), update_remotes)
