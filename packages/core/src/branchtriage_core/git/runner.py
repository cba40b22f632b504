"""Command runner — the only place branchtriage touches a subprocess.

Everything above this module (git queries, the classifier, the triage
orchestrator) talks to a CommandRunner, never to subprocess directly, so the
whole pipeline can be driven by a fake runner that returns canned output.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when a git command exits non-zero or git is not available."""


@dataclass
class CommandResult:
    """Raw output of one command invocation."""

    stdout: str
    stderr: str = ""
    exit_code: int = 0


class CommandRunner(ABC):
    """Narrow capability interface: run an argument vector, return its output."""

    @abstractmethod
    def run(self, args: Sequence[str]) -> CommandResult:
        """Run ``args`` and return stdout, stderr and the exit code.

        Implementations must not raise on a non-zero exit; callers decide
        whether that is fatal.
        """


class SubprocessRunner(CommandRunner):
    """Runs commands for real in ``cwd`` (defaults to the current directory)."""

    def __init__(self, cwd: str | None = None, timeout: float | None = None):
        self._cwd = cwd
        self._timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        logger.debug("$ %s", " ".join(args))
        try:
            result = subprocess.run(
                list(args),
                cwd=self._cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except FileNotFoundError:
            raise GitError(f"{args[0]} is not installed or not in PATH")
        return CommandResult(stdout=result.stdout, stderr=result.stderr, exit_code=result.returncode)


def git(runner: CommandRunner, *args: str) -> str:
    """Run ``git <args>`` through ``runner`` and return stdout.

    A non-zero exit is fatal for the current operation.
    """
    result = runner.run(["git", *args])
    if result.exit_code != 0:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{result.stderr.strip()}")
    return result.stdout
