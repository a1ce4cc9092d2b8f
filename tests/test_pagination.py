"""
Tests for page-number pagination.

Feature: issues-watcher
"""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from issues_watcher.exceptions import DecodeError
from issues_watcher.pagination import (
    PER_PAGE,
    async_fetch_all_pages,
    fetch_all_pages,
    iter_pages,
)


def make_pages(sizes: list[int]):
    """Page fetcher serving pages of the given sizes, recording requested pages."""
    requested: list[int] = []
    offsets = [sum(sizes[:i]) for i in range(len(sizes))]

    def fetch_page(page: int) -> list[int]:
        requested.append(page)
        if page > len(sizes):
            return []
        start = offsets[page - 1]
        return list(range(start, start + sizes[page - 1]))

    return fetch_page, requested


def test_fetches_until_short_page() -> None:
    """Pages of 100, 100 and 37 items take three requests and yield 237 items."""
    fetch_page, requested = make_pages([100, 100, 37])

    items = fetch_all_pages(fetch_page)

    assert items == list(range(237))
    assert requested == [1, 2, 3]


def test_short_first_page_is_the_only_request() -> None:
    """A first page with fewer than PER_PAGE items ends the listing."""
    fetch_page, requested = make_pages([5])

    assert fetch_all_pages(fetch_page) == list(range(5))
    assert requested == [1]


def test_exactly_full_page_requests_one_empty_page() -> None:
    """A full last page is followed by one request that returns nothing."""
    fetch_page, requested = make_pages([PER_PAGE])

    assert len(fetch_all_pages(fetch_page)) == PER_PAGE
    assert requested == [1, 2]


def test_empty_collection() -> None:
    """An empty first page gives no items after one request."""
    fetch_page, requested = make_pages([])

    assert fetch_all_pages(fetch_page) == []
    assert requested == [1]


def test_non_list_page_raises_decode_error() -> None:
    """A page that is not a JSON array is a decode failure."""
    with pytest.raises(DecodeError) as exc_info:
        fetch_all_pages(lambda page: {"message": "Moved Permanently"})

    assert exc_info.value.code == "DECODE_FAILURE"


def test_iter_pages_stops_when_consumer_stops() -> None:
    """Breaking out of iter_pages requests no further pages."""
    fetch_page, requested = make_pages([100, 100, 100, 10])

    for batch in iter_pages(fetch_page):
        if 150 in batch:
            break

    assert requested == [1, 2]


def test_async_fetch_all_pages() -> None:
    """The async variant follows the same stopping rule."""
    fetch_page, requested = make_pages([100, 100, 37])

    async def fetch(page: int) -> list[int]:
        return fetch_page(page)

    items = asyncio.run(async_fetch_all_pages(fetch))

    assert len(items) == 237
    assert requested == [1, 2, 3]


@given(
    full_pages=st.integers(min_value=0, max_value=5),
    tail=st.integers(min_value=0, max_value=PER_PAGE - 1),
)
@settings(max_examples=100)
def test_pagination_returns_every_item_in_order(full_pages: int, tail: int) -> None:
    """
    Property: pagination is complete and ordered.

    For N full pages followed by a short page of T items, fetch_all_pages
    returns all N * PER_PAGE + T items in order after exactly N + 1 requests.
    """
    fetch_page, requested = make_pages([PER_PAGE] * full_pages + [tail])

    items = fetch_all_pages(fetch_page)

    assert items == list(range(full_pages * PER_PAGE + tail))
    assert requested == list(range(1, full_pages + 2))


@given(page_size=st.integers(min_value=1, max_value=50), total=st.integers(min_value=0, max_value=200))
@settings(max_examples=100)
def test_pagination_honours_page_size(page_size: int, total: int) -> None:
    """
    Property: page_size decides when a page is short.

    For any page size and collection size, every item is returned and the
    number of requests is total // page_size + 1.
    """
    data = list(range(total))
    calls = []

    def fetch_page(page: int) -> list[int]:
        calls.append(page)
        return data[(page - 1) * page_size:page * page_size]

    assert fetch_all_pages(fetch_page, page_size) == data
    assert len(calls) == total // page_size + 1
