"""
GitHub data fetching module.

This module handles all GitHub API interactions using PyGithub. Each public
method fetches exactly one page (or one value) and maps PyGithub objects onto
the plain models in :mod:`gh_contrib_svg.models`, so the collection pipeline
never touches PyGithub directly.
"""

import datetime
import logging
from typing import Dict, List, Optional

from github import Auth, Github, GithubException, UnknownObjectException
from github.Commit import Commit
from github.NamedUser import NamedUser
from github.PaginatedList import PaginatedList

from .models import CommitInfo, ContributorListing, RepoRef

# Set up logging
logger = logging.getLogger("gh-contrib-svg.fetcher")

# Largest page size the GitHub REST API accepts
PER_PAGE = 100


class FetchError(RuntimeError):
    """Raised when a GitHub API request fails."""


class GitHubFetcher:
    """
    Fetch repositories, contributors, commits and repository metadata from
    GitHub using PyGithub.

    Page numbers are 1-based, matching the REST API. An exhausted listing
    yields an empty list, never None.

    Args:
        token: Personal access token (or None for unauthenticated, but rate-limited).
        per_page: Items requested per page.
    """

    def __init__(self, token: Optional[str] = None, per_page: int = PER_PAGE) -> None:
        try:
            auth = Auth.Token(token) if token else None
            self._g = Github(auth=auth, per_page=per_page)
            logger.debug("GitHub client initialized (authenticated=%s)", bool(token))
        except Exception as e:
            logger.error("Failed to initialize GitHub client: %s", e)
            raise RuntimeError(f"GitHub client initialization failed: {e}") from e
        self._owner_listings: Dict[str, PaginatedList] = {}

    def _owner_repo_listing(self, owner: str) -> PaginatedList:
        listing = self._owner_listings.get(owner)
        if listing is None:
            try:
                listing = self._g.get_organization(owner).get_repos(type="public")
            except UnknownObjectException:
                # Not an organization; user accounts only expose public repos to others
                logger.info("%s is not an organization, listing user repositories", owner)
                listing = self._g.get_user(owner).get_repos(type="owner")
            self._owner_listings[owner] = listing
        return listing

    def repos_page(self, owner: str, page: int) -> List[str]:
        """
        Fetch one page of an owner's public repositories.

        Returns:
            Fully-qualified repository names ("owner/name") in API order.

        Raises:
            FetchError: If the listing cannot be fetched
        """
        try:
            repos = self._owner_repo_listing(owner).get_page(page - 1)
            return [r.full_name for r in repos]
        except GithubException as e:
            raise FetchError(f"Failed to fetch repositories of {owner} (page {page}): {e}") from e

    def contributors_page(self, ref: RepoRef, page: int) -> List[ContributorListing]:
        """Fetch one page of a repository's contributors, anonymous ones included."""
        try:
            repo = self._g.get_repo(ref.full_name, lazy=True)
            users = repo.get_contributors(anon="true").get_page(page - 1)
            return [self._to_listing(u) for u in users]
        except GithubException as e:
            raise FetchError(f"Failed to fetch contributors of {ref.full_name} (page {page}): {e}") from e

    def commits_page(self, ref: RepoRef, page: int) -> List[CommitInfo]:
        """Fetch one page of a repository's commit history, newest first."""
        try:
            repo = self._g.get_repo(ref.full_name, lazy=True)
            commits = repo.get_commits().get_page(page - 1)
            return [self._to_commit_info(c) for c in commits]
        except GithubException as e:
            raise FetchError(f"Failed to fetch commits of {ref.full_name} (page {page}): {e}") from e

    def fetch_creation_time(self, ref: RepoRef) -> datetime.datetime:
        """
        Fetch the creation timestamp of a repository.

        Raises:
            FetchError: If the repository cannot be accessed or found
        """
        try:
            created_at = self._g.get_repo(ref.full_name).created_at
        except GithubException as e:
            error_msg = f"Failed to fetch creation time of {ref.full_name}: {e}"
            logger.error(error_msg)
            raise FetchError(error_msg) from e
        logger.debug("%s was created at %s", ref.full_name, created_at.isoformat())
        return created_at

    @staticmethod
    def _to_listing(user: NamedUser) -> ContributorListing:
        # Anonymous entries have no login or url; reading login would try to complete them
        if user.type == "Anonymous":
            return ContributorListing(login=None, avatar_url="")
        return ContributorListing(login=user.login, avatar_url=user.avatar_url or "")

    @staticmethod
    def _to_commit_info(commit: Commit) -> CommitInfo:
        git_commit = commit.commit
        git_author = git_commit.author
        date = git_author.date if git_author is not None else git_commit.committer.date
        return CommitInfo(
            sha=commit.sha,
            author=commit.author.login if commit.author else None,
            date=date,
            url=git_commit.url,
        )
