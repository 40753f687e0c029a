"""
gh-contrib-svg - Rank the contributors of GitHub repositories and render them as an SVG.
"""

from .models import CommitInfo, ContributorListing, ContributorRecord, RepoRef
from .paginator import PageResult, Pages, StopReason, traverse_pages
from .fetcher import FetchError, GitHubFetcher
from .collector import collect_contributors, enumerate_repos, supplement_commits
from .aggregator import ContributorAggregator, NoRepositoriesError, aggregate_repositories, merge_record
from .generator import ContributorsSvgGenerator
from .persistence import PersistenceError
from .main import main

__all__ = [
    'CommitInfo',
    'ContributorListing',
    'ContributorRecord',
    'RepoRef',
    'PageResult',
    'Pages',
    'StopReason',
    'traverse_pages',
    'FetchError',
    'GitHubFetcher',
    'collect_contributors',
    'enumerate_repos',
    'supplement_commits',
    'ContributorAggregator',
    'NoRepositoriesError',
    'aggregate_repositories',
    'merge_record',
    'ContributorsSvgGenerator',
    'PersistenceError',
    'main',
]
