"""Shared fixtures: a fake command runner with canned git output."""

from __future__ import annotations

import pytest

from branchtriage_core.git.runner import CommandResult, CommandRunner


class FakeRunner(CommandRunner):
    """Returns canned stdout per argument vector and records every call.

    Unknown commands succeed with empty output, which is what `git log --grep`
    prints when nothing matches.
    """

    def __init__(self, outputs: dict | None = None, failures: dict | None = None):
        self.outputs = {tuple(k): v for k, v in (outputs or {}).items()}
        self.failures = {tuple(k): v for k, v in (failures or {}).items()}
        self.calls: list[tuple[str, ...]] = []

    def add(self, args, stdout: str) -> FakeRunner:
        self.outputs[tuple(args)] = stdout
        return self

    def run(self, args):
        args = tuple(args)
        self.calls.append(args)
        if args in self.failures:
            return CommandResult(stdout="", stderr=self.failures[args], exit_code=128)
        return CommandResult(stdout=self.outputs.get(args, ""))

    def called(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]


class FakeCache:
    """In-memory stand-in for the store's triage cache."""

    def __init__(self, decisions: dict | None = None):
        self.decisions = dict(decisions or {})

    def has(self, commit_hash):
        return commit_hash in self.decisions

    def get(self, commit_hash):
        return self.decisions.get(commit_hash)

    def decide(self, commit_hash, message, needs_cherry_pick):
        from types import SimpleNamespace

        self.decisions[commit_hash] = SimpleNamespace(message=message, needs_cherry_pick=needs_cherry_pick)

    def clear(self):
        self.decisions.clear()

    def prune(self, commits, target_ref):
        refs = {c.hash: c.ref for c in commits}
        for h in list(self.decisions):
            if h not in refs or (self.decisions[h].needs_cherry_pick and refs[h] == target_ref):
                del self.decisions[h]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def fake_cache():
    return FakeCache()


def message_query(commit_hash: str) -> tuple[str, ...]:
    return ("git", "log", "--format=%s", "-n", "1", commit_hash)


def grep_query(ref: str, pattern: str) -> tuple[str, ...]:
    return ("git", "log", ref, "--oneline", "--grep", pattern)
