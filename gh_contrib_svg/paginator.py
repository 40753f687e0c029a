"""
Page traversal module.

GitHub list endpoints are page-numbered. This module walks such an endpoint
from page 1 onward and stops either when the resource is exhausted (an empty
page) or when a caller-supplied predicate says the page just fetched is the
last one needed.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Optional, Sequence, TypeVar

T = TypeVar("T")

logger = logging.getLogger("gh-contrib-svg.paginator")


class StopReason(enum.Enum):
    """Why a page traversal ended."""
    EXHAUSTED = "exhausted"
    PREDICATE = "predicate"


@dataclass
class PageResult(Generic[T]):
    """A single fetched page: its 1-based number and its items in API order."""
    number: int
    items: List[T]


FetchPage = Callable[[int], Sequence[T]]
StopPredicate = Callable[[PageResult[T]], bool]


class Pages(Generic[T]):
    """
    Lazy, restartable sequence of pages.

    Iterating requests page 1, 2, ... on demand. An empty page ends the
    traversal without being yielded. When ``stop_after`` returns True for a
    page, that page is still yielded and nothing after it is requested.
    ``stop_reason`` records which of the two happened; it stays None while a
    traversal is in progress or if the consumer stopped early.

    Args:
        fetch_page: Callable returning the items of a 1-based page number.
        stop_after: Optional predicate evaluated against each non-empty page.
    """

    def __init__(self, fetch_page: FetchPage, stop_after: Optional[StopPredicate] = None) -> None:
        self._fetch_page = fetch_page
        self._stop_after = stop_after
        self.stop_reason: Optional[StopReason] = None
        self.pages_fetched = 0

    def __iter__(self) -> Iterator[PageResult[T]]:
        self.stop_reason = None
        self.pages_fetched = 0
        number = 1
        while True:
            items = list(self._fetch_page(number))
            self.pages_fetched += 1
            if not items:
                self.stop_reason = StopReason.EXHAUSTED
                logger.debug("Page %d is empty, traversal exhausted", number)
                return
            page = PageResult(number=number, items=items)
            if self._stop_after is not None and self._stop_after(page):
                self.stop_reason = StopReason.PREDICATE
                logger.debug("Stop predicate satisfied on page %d", number)
                yield page
                return
            yield page
            number += 1

    def items(self) -> List[T]:
        """Run a full traversal and return every item, in page order."""
        collected: List[T] = []
        for page in self:
            collected.extend(page.items)
        return collected


def traverse_pages(fetch_page: FetchPage, stop_after: Optional[StopPredicate] = None) -> List[T]:
    """Concatenate the items of all pages of ``fetch_page`` (see :class:`Pages`)."""
    return Pages(fetch_page, stop_after).items()
