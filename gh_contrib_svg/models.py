"""
Data models for the contributors SVG generator.

This module contains the shared data structures used across all modules.
"""

import datetime
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class RepoRef:
    """A repository identified by owner and short name."""
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class ContributorListing:
    """One entry of a repository's contributor listing."""
    login: Optional[str]
    avatar_url: str


@dataclass
class CommitInfo:
    """Represents a single commit with its metadata."""
    sha: str
    author: Optional[str]
    date: datetime.datetime
    url: str


@dataclass
class ContributorRecord:
    """Aggregated data for one contributor identity."""
    avatar_url: str
    commit_urls: List[str] = field(default_factory=list)

    @property
    def commit_count(self) -> int:
        return len(self.commit_urls)


ContributorMap = Dict[str, ContributorRecord]
Ranking = List[Tuple[str, ContributorRecord]]
