"""
Cross-repository aggregation module.

Merges the per-repository contributor maps of a run into one map and ranks
contributors by commit count.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from .collector import collect_contributors, enumerate_repos
from .models import ContributorMap, ContributorRecord, Ranking, RepoRef

logger = logging.getLogger("gh-contrib-svg.aggregator")


class NoRepositoriesError(RuntimeError):
    """Raised when a run has no repository to process."""


def merge_record(existing: ContributorRecord, incoming: ContributorRecord) -> ContributorRecord:
    """
    Merge ``incoming`` into ``existing`` and return ``existing``.

    The two fields follow separate policies: the avatar seen first is kept,
    commit URLs are appended in order.
    """
    existing.commit_urls.extend(incoming.commit_urls)
    return existing


class ContributorAggregator:
    """
    Run-wide accumulator of contributor records.

    Maps are merged in the order they are added; that order decides how
    contributors with equal commit counts are ranked.
    """

    def __init__(self) -> None:
        self.contributors: ContributorMap = {}

    def __len__(self) -> int:
        return len(self.contributors)

    def add(self, contributors: ContributorMap) -> None:
        """Merge one repository's contributor map."""
        for login, record in contributors.items():
            existing = self.contributors.get(login)
            if existing is None:
                self.contributors[login] = ContributorRecord(
                    avatar_url=record.avatar_url,
                    commit_urls=list(record.commit_urls),
                )
            else:
                merge_record(existing, record)

    def ranking(self) -> Ranking:
        """Contributors sorted by commit count, descending; ties keep merge order."""
        return sorted(self.contributors.items(), key=lambda item: item[1].commit_count, reverse=True)

    def identities(self) -> List[str]:
        """Logins in ranked order."""
        return [login for login, _ in self.ranking()]


def resolve_repositories(fetcher, owner: str, repo: Optional[str] = None) -> List[RepoRef]:
    """
    Determine the repositories of a run: ``owner/repo`` alone, or every
    public repository of ``owner``.

    Raises:
        NoRepositoriesError: If the owner has no public repository
        FetchError: If the repository listing fails
    """
    if repo:
        return [RepoRef(owner=owner, repo=repo)]
    repos = enumerate_repos(fetcher, owner)
    if not repos:
        raise NoRepositoriesError(f"No repos found for {owner}")
    return repos


def aggregate_repositories(fetcher, repos: Iterable[RepoRef], exclude: Optional[str] = None,
                           workers: int = 1,
                           aggregator: Optional[ContributorAggregator] = None) -> ContributorAggregator:
    """
    Collect every repository in ``repos`` except the one named ``exclude``
    and merge the results.

    With ``workers`` > 1 repositories are collected on a thread pool, but
    their maps are still merged in ``repos`` order, so the ranking is the
    same as for a sequential run.

    Returns:
        The aggregator holding the merged contributors

    Raises:
        FetchError: If a repository creation time cannot be fetched
    """
    if aggregator is None:
        aggregator = ContributorAggregator()

    selected: List[RepoRef] = []
    for ref in repos:
        if exclude and ref.repo == exclude:
            logger.info("Skipping excluded repository %s", ref.full_name)
            continue
        selected.append(ref)

    if workers <= 1:
        for ref in selected:
            aggregator.add(collect_contributors(fetcher, ref))
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(collect_contributors, fetcher, ref) for ref in selected]
            for future in futures:
                aggregator.add(future.result())

    logger.info("Aggregated %d contributors from %d repositories", len(aggregator), len(selected))
    return aggregator
