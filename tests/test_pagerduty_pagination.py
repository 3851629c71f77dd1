"""Tests for pagerduty_backend.pagerduty_api.pagination."""

from collections.abc import Sequence

import pytest

from pagerduty_backend.pagerduty_api.pagination import (
    Page,
    drain,
    more_flag,
    within_total,
)


class PagedSource:
    """Serves pages from a list of (items, more, total) tuples."""

    def __init__(self, pages: Sequence[tuple[list[int], bool | None, int | None]]) -> None:
        self.pages = list(pages)
        self.calls: list[tuple[int, int]] = []

    async def __call__(self, offset: int, limit: int) -> Page[int]:
        self.calls.append((offset, limit))
        items, more, total = self.pages[len(self.calls) - 1]
        return Page(items=items, offset=offset, limit=limit, more=more, total=total)


@pytest.mark.asyncio
async def test_drain_more_flag_concatenates_pages_in_order() -> None:
    source = PagedSource([([1, 2], True, None), ([3, 4], True, None), ([5], False, None)])

    result = await drain(source, has_more=more_flag, limit=2)

    assert result == [1, 2, 3, 4, 5]
    assert source.calls == [(0, 2), (2, 2), (4, 2)]


@pytest.mark.asyncio
async def test_drain_more_flag_missing_means_last_page() -> None:
    source = PagedSource([([1], None, None)])

    assert await drain(source, has_more=more_flag) == [1]
    assert source.calls == [(0, 50)]


@pytest.mark.asyncio
async def test_drain_empty_single_page() -> None:
    source = PagedSource([([], False, None)])

    assert await drain(source) == []


@pytest.mark.asyncio
async def test_drain_within_total_uses_first_page_total() -> None:
    """Later pages reporting another total do not change the page count."""
    source = PagedSource([([1, 2], None, 5), ([3, 4], None, 99), ([5], None, 99)])

    result = await drain(source, has_more=within_total, limit=2)

    assert result == [1, 2, 3, 4, 5]
    assert source.calls == [(0, 2), (2, 2), (4, 2)]


@pytest.mark.asyncio
async def test_drain_within_total_exact_multiple() -> None:
    source = PagedSource([([1, 2], None, 4), ([3, 4], None, 4)])

    assert await drain(source, has_more=within_total, limit=2) == [1, 2, 3, 4]
    assert len(source.calls) == 2


@pytest.mark.asyncio
async def test_drain_within_total_without_total_stops() -> None:
    source = PagedSource([([1, 2], None, None)])

    assert await drain(source, has_more=within_total, limit=2) == [1, 2]


@pytest.mark.asyncio
async def test_drain_starts_at_offset() -> None:
    source = PagedSource([([7], False, None)])

    await drain(source, offset=100, limit=10)

    assert source.calls == [(100, 10)]


@pytest.mark.asyncio
async def test_drain_custom_merge() -> None:
    source = PagedSource([([1, 2], True, None), ([2, 3], False, None)])

    def merge_unique(collected: list[int], page: Page[int]) -> list[int]:
        return collected + [i for i in page.items if i not in collected]

    assert await drain(source, merge=merge_unique) == [1, 2, 3]


@pytest.mark.asyncio
async def test_drain_failing_page_aborts() -> None:
    """No partial result when a later page fails."""
    calls = 0

    async def fetch(offset: int, limit: int) -> Page[int]:
        nonlocal calls
        calls += 1
        if calls == 2:
            raise RuntimeError("page 2 failed")
        return Page(items=[offset], offset=offset, limit=limit, more=True)

    with pytest.raises(RuntimeError, match="page 2 failed"):
        await drain(fetch)
    assert calls == 2


@pytest.mark.asyncio
async def test_drain_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError, match="limit must be positive"):
        await drain(PagedSource([]), limit=0)
