from __future__ import annotations

import logging
from urllib.parse import quote_plus

from github import Github, GithubException

logger = logging.getLogger(__name__)


def pull_url(repo_slug: str, pr_number: str | int) -> str:
    return f"https://github.com/{repo_slug}/pull/{pr_number}"


def cherry_pick_search_url(repo_slug: str, label: str = "cherry-pick") -> str:
    """Return the GitHub search page listing open PRs that carry ``label``."""
    query = quote_plus(f"is:pr is:open label:{label}")
    return f"https://github.com/{repo_slug}/pulls?q={query}"


def get_repo(repo_slug: str, token: str):
    return Github(token).get_repo(repo_slug)


def get_cherry_pick_pulls(repo, label: str = "cherry-pick") -> list:
    """Return the open pull requests labelled ``label``.

    Uses the issues endpoint because it filters by label server-side; issues
    that aren't pull requests are dropped.
    """
    issues = repo.get_issues(state="open", labels=[label])
    return [issue for issue in issues if issue.pull_request is not None]


class PullRequestLinks:
    """Builds the PR links a triage session opens in the browser.

    Listing labelled PRs needs a token; without one (or when the API call
    fails) the label search page is used instead.
    """

    def __init__(self, repo_slug: str | None, token: str | None = None, label: str = "cherry-pick"):
        self.repo_slug = repo_slug
        self._token = token
        self._label = label

    def pull(self, pr_number: str | None) -> str | None:
        if not pr_number or not self.repo_slug:
            return None
        return pull_url(self.repo_slug, pr_number)

    def cherry_picks(self) -> list[str]:
        if not self.repo_slug:
            logger.warning("No GitHub repository configured; not opening cherry-pick PRs.")
            return []
        if self._token:
            try:
                pulls = get_cherry_pick_pulls(get_repo(self.repo_slug, self._token), self._label)
                return [pull.html_url for pull in pulls]
            except GithubException as e:
                logger.warning("Could not list %s PRs (%s); opening the search page instead.", self._label, e)
        return [cherry_pick_search_url(self.repo_slug, self._label)]


def parse_repo_slug(remote_url: str | None) -> str | None:
    """Turn a GitHub remote URL into ``owner/name``.

    https://github.com/owner/repo.git  →  owner/repo
    git@github.com:owner/repo.git      →  owner/repo
    """
    if not remote_url or "github.com" not in remote_url:
        return None
    slug = remote_url.strip().split("github.com")[-1].lstrip("/:").removesuffix(".git").rstrip("/")
    return slug if slug.count("/") == 1 else None
