"""Abstract triage cache interface.

The cache maps commit hashes to triage decisions so a commit is only asked
about once. The orchestrator depends on BaseTriageCache, not on the JSON
file behind it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Protocol

from branchtriage_store.models import TriageDecision


class CommitLike(Protocol):
    hash: str | None
    ref: str


class BaseTriageCache(ABC):
    """Mapping of commit hash → TriageDecision, owned by a single process."""

    @abstractmethod
    def get(self, commit_hash: str) -> TriageDecision | None:
        """Return the decision for a commit, or None."""

    @abstractmethod
    def set(self, commit_hash: str, decision: TriageDecision) -> None:
        """Insert or replace the decision for a commit."""

    @abstractmethod
    def delete(self, commit_hash: str) -> None:
        """Forget a commit. Unknown hashes are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return the cached hashes."""

    @abstractmethod
    def persist(self) -> None:
        """Write the cache to its backing storage."""

    def has(self, commit_hash: str | None) -> bool:
        return commit_hash is not None and self.get(commit_hash) is not None

    def __contains__(self, commit_hash: object) -> bool:
        return isinstance(commit_hash, str) and self.has(commit_hash)

    def __len__(self) -> int:
        return len(self.keys())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def items(self) -> list[tuple[str, TriageDecision]]:
        return [(h, self.get(h)) for h in self.keys()]

    def decide(self, commit_hash: str, message: str, needs_cherry_pick: bool) -> None:
        self.set(commit_hash, TriageDecision(message=message, needs_cherry_pick=needs_cherry_pick))

    def clear(self) -> None:
        for commit_hash in self.keys():
            self.delete(commit_hash)

    def prune(self, commits: Iterable[CommitLike], target_ref: str) -> None:
        """Drop decisions that no longer apply.

        A decision goes when its commit is no longer in ``commits``, or when
        it said "needs cherry pick" and the commit now resolves to
        ``target_ref`` (the cherry pick landed). Running it twice changes
        nothing the second time.
        """
        refs = {c.hash: c.ref for c in commits if c.hash is not None}

        for commit_hash in self.keys():
            if commit_hash not in refs:
                self.delete(commit_hash)

        for commit_hash, decision in self.items():
            if decision.needs_cherry_pick and refs[commit_hash] == target_ref:
                self.delete(commit_hash)
