"""Offset/limit pagination for PagerDuty list endpoints.

PagerDuty signals the end of a listing in two ways: a ``more`` flag on every
page, or a ``total`` count (requested with ``total=true``). ``drain`` fetches
pages one after the other and asks a ``has_more`` strategy whether to go on;
the strategies for both styles live here.

Pages are fetched sequentially, the next request depends on the metadata of
the previous response. A failing page propagates its exception and the pages
collected so far are dropped.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

DEFAULT_PAGE_SIZE = 50

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a listing.

    Attributes:
        items: Objects on this page
        offset: Offset the page was requested with
        limit: Page size the page was requested with
        more: Upstream "more" flag, if reported
        total: Upstream total count, if reported
    """

    items: Sequence[T]
    offset: int
    limit: int
    more: bool | None = None
    total: int | None = None


FetchPage: TypeAlias = Callable[[int, int], Awaitable[Page[T]]]
HasMore: TypeAlias = Callable[[Sequence[Page[T]]], bool]
MergePage: TypeAlias = Callable[[list[T], Page[T]], list[T]]


def more_flag(pages: Sequence[Page[T]]) -> bool:
    """Continue while the last page says there is more."""
    return bool(pages[-1].more)


def within_total(pages: Sequence[Page[T]]) -> bool:
    """Continue while the next offset is below the total of the first page.

    A first page without total counts as a single page listing.
    """
    last = pages[-1]
    return last.offset + last.limit < (pages[0].total or 0)


def concat(collected: list[T], page: Page[T]) -> list[T]:
    collected.extend(page.items)
    return collected


async def drain(
    fetch_page: FetchPage[T],
    *,
    has_more: HasMore[T] = more_flag,
    merge: MergePage[T] = concat,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> list[T]:
    """Fetch all pages of a listing, in page order.

    Args:
        fetch_page: Coroutine function called with (offset, limit)
        has_more: Decides after each page whether another page is fetched
        merge: Folds a page into the collected items
        limit: Page size
        offset: Offset of the first page

    Returns:
        All items of all pages
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    pages: list[Page[T]] = []
    collected: list[T] = []
    while True:
        page = await fetch_page(offset, limit)
        pages.append(page)
        collected = merge(collected, page)
        if not has_more(pages):
            return collected
        offset += limit
