"""
Async HTTP Transport for the GitHub REST API.

Same request, pagination and error semantics as HTTPTransport, using the
httpx async client. A semaphore bounds the number of requests in flight.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Coroutine
from typing import Any, TypeVar

import httpx

from issues_watcher.exceptions import NetworkError, WatcherError
from issues_watcher.logging import log_http_request, log_http_response
from issues_watcher.pagination import PER_PAGE, async_fetch_all_pages, async_iter_pages
from issues_watcher.transport import (
    DEFAULT_BASE_URL,
    DEFAULT_USER_AGENT,
    BackoffPolicy,
    RetryConfig,
    auth_headers,
    decode_json,
    parse_error_response,
)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENCY = 8


async def gather_or_cancel(*aws: Awaitable[T]) -> list[T]:
    """
    Run awaitables concurrently and return their results in order.

    Unlike asyncio.gather, the first failure (or cancellation of the caller)
    cancels the remaining awaitables and waits for them to finish before the
    exception propagates, so no request outlives the call.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class AsyncHTTPTransport(BackoffPolicy):
    """
    Async HTTP transport with bounded concurrency.

    Handles:
    - Token authorization and resource-specific Accept headers
    - Page-number pagination of list endpoints
    - At most ``max_concurrency`` requests in flight
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            token: GitHub token, sent as "token <value>"
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            user_agent: User-Agent header value
            max_concurrency: Maximum number of requests in flight
            http_transport: Custom httpx async transport (used by tests)
        """
        super().__init__(retry_config)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=auth_headers(token, user_agent),
            transport=http_transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
    ) -> Any:
        """
        GET a resource and decode its JSON body.

        Raises:
            WatcherError: On network, decode or API errors
        """
        headers = {"Accept": accept} if accept else None

        async def make_request() -> httpx.Response:
            log_http_request("GET", path, headers, params)
            async with self._semaphore:
                return await self._client.get(path, params=params, headers=headers)

        return await self._execute_with_retry(make_request)

    async def get_all_pages(
        self,
        path: str,
        accept: str | None = None,
        params: dict[str, Any] | None = None,
        per_page: int = PER_PAGE,
    ) -> list[Any]:
        """GET every page of a list endpoint, one page after another."""

        async def fetch_page(page: int) -> list[Any]:
            query = {**(params or {}), "page": page, "per_page": per_page}
            return await self.get_json(path, params=query, accept=accept)

        return await async_fetch_all_pages(fetch_page, per_page)

    def iter_pages(
        self,
        path: str,
        accept: str | None = None,
        params: dict[str, Any] | None = None,
        per_page: int = PER_PAGE,
    ) -> AsyncIterator[list[Any]]:
        """Yield the pages of a list endpoint; stop iterating to stop fetching."""

        async def fetch_page(page: int) -> list[Any]:
            query = {**(params or {}), "page": page, "per_page": per_page}
            return await self.get_json(path, params=query, accept=accept)

        return async_iter_pages(fetch_page, per_page)

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> Any:
        """
        Execute a request, retrying retryable errors when configured.

        Raises:
            WatcherError: On non-retryable errors or after max retries
        """
        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = await request_fn()
            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise NetworkError(f"{type(e).__name__}: {e}") from e
                await asyncio.sleep(self._get_backoff_time(attempt, None))
                continue

            log_http_response(
                response.status_code,
                str(response.request.url),
                (time.monotonic() - started) * 1000,
            )

            if response.status_code < 400:
                return decode_json(response)

            error = parse_error_response(response)
            wait = self._error_backoff(error, response, attempt)
            if wait is None:
                raise error
            await asyncio.sleep(wait)

        raise WatcherError("UNKNOWN_ERROR", "Request failed with no error details")
