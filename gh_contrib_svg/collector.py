"""
Contributor collection module.

Turns GitHub listings into per-repository contributor maps:

 - enumerate_repos: every public repository of an owner.
 - collect_contributors: seed a contributor map from the contributor listing,
   then enrich it with supplement_commits.
 - supplement_commits: walk the commit history newest-first down to the
   repository creation time and attribute each genuine commit to a known
   contributor.

Commits dated at or before the repository creation time come from imported
or migrated history and are never counted.
"""

import datetime
import logging
from typing import Iterable, List

from .fetcher import FetchError
from .models import CommitInfo, ContributorListing, ContributorMap, ContributorRecord, RepoRef
from .paginator import PageResult, Pages, StopPredicate, traverse_pages

logger = logging.getLogger("gh-contrib-svg.collector")


def enumerate_repos(fetcher, owner: str) -> List[RepoRef]:
    """
    List every public repository of ``owner``.

    Returns an empty list when the owner has no public repositories.

    Raises:
        FetchError: If any page of the listing cannot be fetched
    """
    logger.info("Fetching %s repos...", owner)
    full_names = traverse_pages(lambda page: fetcher.repos_page(owner, page))
    logger.info("Fetching %s repos done (%d found)", owner, len(full_names))
    # "full_name": "octocat/Hello-World"
    return [RepoRef(owner=owner, repo=name.split("/")[1]) for name in full_names]


def seed_contributors(listings: Iterable[ContributorListing]) -> ContributorMap:
    """Build a fresh contributor map; the first avatar seen for a login wins."""
    contributors: ContributorMap = {}
    for listing in listings:
        if not listing.login:
            continue
        if listing.login not in contributors:
            contributors[listing.login] = ContributorRecord(avatar_url=listing.avatar_url)
    return contributors


def collect_contributors(fetcher, ref: RepoRef) -> ContributorMap:
    """
    Collect the contributors of one repository together with their commits.

    A failed contributor listing is logged and yields an empty map, so one
    uninspectable repository does not abort a whole run.

    Raises:
        FetchError: If the repository creation time cannot be fetched
    """
    logger.info("Fetching %s contributors...", ref.full_name)
    try:
        listings = traverse_pages(lambda page: fetcher.contributors_page(ref, page))
    except FetchError as e:
        logger.error("Fetching %s contributors failed: %s", ref.full_name, e)
        listings = []
    else:
        logger.info("Fetching %s contributors done (%d entries)", ref.full_name, len(listings))

    contributors = seed_contributors(listings)
    supplement_commits(fetcher, ref, contributors)
    return contributors


def reaches_before(boundary: datetime.datetime) -> StopPredicate:
    """Stop predicate: the page holds a commit authored strictly before ``boundary``."""
    def predicate(page: PageResult[CommitInfo]) -> bool:
        return any(commit.date < boundary for commit in page.items)
    return predicate


def attribute_commits(commits: Iterable[CommitInfo], created_at: datetime.datetime,
                      contributors: ContributorMap) -> int:
    """
    Append the URL of every genuine commit to its author's record.

    A commit counts only if it has a resolved author login, was authored
    strictly after ``created_at`` and its author is already in
    ``contributors``; commits never add new logins.

    Returns:
        Number of commits attributed
    """
    attributed = 0
    for commit in commits:
        if not commit.author:
            continue
        if commit.date <= created_at:
            continue
        record = contributors.get(commit.author)
        if record is None:
            continue
        record.commit_urls.append(commit.url)
        attributed += 1
    return attributed


def supplement_commits(fetcher, ref: RepoRef, contributors: ContributorMap) -> int:
    """
    Enrich ``contributors`` in place with the commits of ``ref``.

    The history is walked newest-first and stops after the first page that
    reaches back before the repository creation time. A failure part way
    through keeps the pages already fetched.

    Returns:
        Number of commits attributed

    Raises:
        FetchError: If the repository creation time cannot be fetched
    """
    created_at = fetcher.fetch_creation_time(ref)
    if not contributors:
        logger.warning("No contributors for %s, skipping commit history", ref.full_name)
        return 0

    logger.info("Fetching %s commits...", ref.full_name)
    pages = Pages(lambda page: fetcher.commits_page(ref, page), stop_after=reaches_before(created_at))
    commits: List[CommitInfo] = []
    try:
        for page in pages:
            commits.extend(page.items)
    except FetchError as e:
        logger.error("Fetching %s commits failed after %d commits: %s", ref.full_name, len(commits), e)
    else:
        logger.info("Fetching %s commits done (%d commits, %s)",
                    ref.full_name, len(commits), pages.stop_reason.value)

    attributed = attribute_commits(commits, created_at, contributors)
    logger.debug("Attributed %d of %d commits in %s", attributed, len(commits), ref.full_name)
    return attributed
