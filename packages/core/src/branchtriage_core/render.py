"""Terminal output for triage runs."""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule

from branchtriage_core.commits import CommitRecord

console = Console(highlight=False)

SWATCH = "■"

# Legend styles for the color-coded log.
NEEDS_CHERRY_PICK_STYLE = "green"
NO_CHERRY_PICK_STYLE = "dim red"
UNTRIAGED_STYLE = "yellow"


def log_section(title: str) -> None:
    """Print a dim rule followed by ``# title``."""
    console.print(Rule(style="dim"))
    console.print(f"[dim]# {escape(title)}[/dim]")


def color_key(lines: Iterable[str]) -> Panel:
    return Panel("\n".join(lines), title="Key", title_align="left", border_style="dim", padding=1, expand=False)


def triage_legend(destination: str, destination_style: str = "dim blue") -> Panel:
    return color_key(
        [
            f"[{NEEDS_CHERRY_PICK_STYLE}]{SWATCH}[/] Needs to be cherry picked",
            f"[{NO_CHERRY_PICK_STYLE}]{SWATCH}[/] Doesn't need to be cherry picked",
            f"[{destination_style}]{SWATCH}[/] Cherry picked into {escape(destination)}",
            f"[dim]{SWATCH}[/] Chore or \"boundary\" commit (ignore)",
            f"[{UNTRIAGED_STYLE}]{SWATCH}[/] Not in the commit data (needs to be manually triaged)",
        ]
    )


def report_new_commits(commits: list[CommitRecord], source: str, destination: str) -> None:
    console.print(
        f"There's [magenta]{len(commits)}[/magenta] commits in the [magenta]{escape(source)}[/magenta] branch "
        f"that aren't in the [magenta]{escape(destination)}[/magenta] branch:\n"
    )
    for commit in commits:
        console.print(f"[dim]{commit.hash}[/dim] {escape(commit.message or '')}")


def render_commit_log(commits: Iterable[CommitRecord]) -> None:
    for commit in commits:
        console.print(commit.pretty)
