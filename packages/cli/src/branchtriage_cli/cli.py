"""CLI entry point for branchtriage.

Commands:
  triage-main          — triage commits from main to next
  triage-next          — triage commits from next to the release branch
  get-release-commits  — list the commits that make up the current release

Every command runs from a repository with exactly one local release branch
(and, when `working_branch` is configured, from that branch). Anything else
exits with status 1 before a command runs.
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.logging import RichHandler

from branchtriage_cli.commands.release_commits import release_commits_cmd
from branchtriage_cli.commands.triage import triage_main_cmd, triage_next_cmd
from branchtriage_core.git.runner import GitError, SubprocessRunner
from branchtriage_core.triage import PreconditionError, check_working_branch, resolve_release_branch


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("branchtriage"),
    prog_name="branchtriage",
)
@click.option(
    "--config",
    "config_path",
    default=".branchtriage.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="BRANCHTRIAGE_CONFIG",
)
@click.option("--data-dir", default=None, help="Directory for triage caches (overrides config).")
@click.option(
    "--hash-width",
    type=click.IntRange(4, 40),
    default=None,
    help="Minimum commit hash length (overrides config).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every git command.")
@click.pass_context
def main(ctx: click.Context, config_path: str, data_dir: str, hash_width: int, verbose: bool):
    """Triage commits across main, next and the release branch."""
    from branchtriage_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"data_dir": data_dir, "hash_width": hash_width})
    runner = SubprocessRunner()

    try:
        check_working_branch(runner, config.get("working_branch"))
        release_branch = resolve_release_branch(runner, config["release_branch_glob"])
    except (PreconditionError, GitError) as e:
        raise click.ClickException(str(e))

    ctx.obj["config"] = config
    ctx.obj["runner"] = runner
    ctx.obj["release_branch"] = release_branch


main.add_command(triage_main_cmd)
main.add_command(triage_next_cmd)
main.add_command(release_commits_cmd)
