"""
Page-number pagination for the platform's list endpoints.

Pages are requested strictly one after another, starting at 1. The listing
ends with the first page holding fewer than ``page_size`` items, so an empty
page is only requested when the previous one was exactly full.
"""

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import Any, TypeVar

from issues_watcher.exceptions import DecodeError
from issues_watcher.logging import get_logger

T = TypeVar("T")

PER_PAGE = 100

logger = get_logger("pagination")


def _check_page(page: int, batch: Any) -> list[Any]:
    if not isinstance(batch, list):
        raise DecodeError(
            f"page {page}: expected a JSON array, got {type(batch).__name__}"
        )
    return batch


def iter_pages(
    fetch_page: Callable[[int], list[T]],
    page_size: int = PER_PAGE,
) -> Iterator[list[T]]:
    """
    Yield the pages of a paginated collection until the first short page.

    The next page is only requested when the consumer asks for it, so
    breaking out of the loop stops the listing.

    Args:
        fetch_page: Returns the decoded items of a 1-based page
        page_size: Page size the pages were requested with

    Raises:
        DecodeError: If a page is not a list
    """
    page = 0
    while True:
        page += 1
        batch = _check_page(page, fetch_page(page))
        yield batch
        if len(batch) < page_size:
            return


def fetch_all_pages(
    fetch_page: Callable[[int], list[T]],
    page_size: int = PER_PAGE,
) -> list[T]:
    """
    Collect every item of a paginated collection.

    Returns:
        All items, in page order
    """
    items: list[T] = []
    pages = 0
    for batch in iter_pages(fetch_page, page_size):
        pages += 1
        items.extend(batch)
    logger.debug("Fetched %d item(s) in %d page(s)", len(items), pages)
    return items


async def async_iter_pages(
    fetch_page: Callable[[int], Awaitable[list[T]]],
    page_size: int = PER_PAGE,
) -> AsyncIterator[list[T]]:
    """Async twin of iter_pages."""
    page = 0
    while True:
        page += 1
        batch = _check_page(page, await fetch_page(page))
        yield batch
        if len(batch) < page_size:
            return


async def async_fetch_all_pages(
    fetch_page: Callable[[int], Awaitable[list[T]]],
    page_size: int = PER_PAGE,
) -> list[T]:
    """Async twin of fetch_all_pages."""
    items: list[T] = []
    pages = 0
    async for batch in async_iter_pages(fetch_page, page_size):
        pages += 1
        items.extend(batch)
    logger.debug("Fetched %d item(s) in %d page(s)", len(items), pages)
    return items
