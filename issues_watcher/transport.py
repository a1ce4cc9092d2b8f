"""
HTTP Transport for the GitHub REST API.

Handles authenticated GET requests, page-number pagination, optional retry
and mapping of error responses onto typed exceptions.
"""

import json
import random
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from issues_watcher.exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    DecodeError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    WatcherError,
)
from issues_watcher.logging import log_http_request, log_http_response
from issues_watcher.pagination import PER_PAGE, fetch_all_pages, iter_pages

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "issues-watcher"


@dataclass
class MediaTypes:
    """Accept headers per resource family.

    Classic project boards and the issue listing used preview media types;
    override these when the platform's API versioning moves on.
    """

    default: str = "application/vnd.github+json"
    issues: str = "application/vnd.github.machine-man-preview"
    projects: str = "application/vnd.github.inertia-preview+json"


@dataclass
class RetryConfig:
    """Configuration for retry behavior. Retrying is off unless max_retries > 0."""

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


def auth_headers(token: str, user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Headers sent with every API request."""
    return {
        "Authorization": f"token {token}",
        "User-Agent": user_agent,
    }


def decode_json(response: httpx.Response) -> Any:
    """
    Decode a successful response body.

    Raises:
        DecodeError: If the body is not valid JSON
    """
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"{response.request.url}: invalid JSON body: {e}") from e


def parse_error_response(response: httpx.Response) -> APIError:
    """
    Parse an error response into a typed exception.

    Args:
        response: HTTP response with error status

    Returns:
        Appropriate APIError subclass
    """
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    message = data.get("message") or f"HTTP {response.status_code}"
    request_id = response.headers.get("X-GitHub-Request-Id")
    status_code = response.status_code
    code = f"HTTP_{status_code}"

    if status_code == 429 or (
        status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
    ):
        return RateLimitedError(
            "RATE_LIMITED", message, status_code, _retry_after(response), request_id
        )
    if status_code == 401:
        return AuthenticationError(code, message, status_code, request_id)
    elif status_code == 403:
        return AuthorizationError(code, message, status_code, request_id)
    elif status_code == 404:
        return NotFoundError(code, message, status_code, request_id)
    elif status_code >= 500:
        return ServerError(code, message, status_code, request_id)
    else:
        return APIError(code, message, status_code, request_id)


def _retry_after(response: httpx.Response) -> int:
    """Seconds to wait, from Retry-After or the rate limit reset time."""
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return int(retry_after)
        except ValueError:
            pass
    reset = response.headers.get("X-RateLimit-Reset")
    if reset is not None:
        try:
            return max(int(reset) - int(time.time()), 0)
        except ValueError:
            pass
    return 60


class BackoffPolicy:
    """Retry decisions shared by the sync and async transports."""

    def __init__(self, retry_config: RetryConfig | None = None) -> None:
        self.retry_config = retry_config or RetryConfig()

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return min(float(retry_after), self.retry_config.max_backoff)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _error_backoff(
        self, error: APIError, response: httpx.Response, attempt: int
    ) -> float | None:
        """
        Time to wait before retrying an error response.

        Rate-limited responses (429, or 403 with an exhausted rate limit) are
        retried when 429 is retryable, and wait until the limit resets.

        Returns:
            Seconds to wait, or None if the error should be raised
        """
        if isinstance(error, RateLimitedError):
            if not self._should_retry(429, attempt):
                return None
            return self._get_backoff_time(attempt, str(error.retry_after))

        if not self._should_retry(error.status_code, attempt):
            return None
        return self._get_backoff_time(attempt, response.headers.get("Retry-After"))


class HTTPTransport(BackoffPolicy):
    """
    HTTP transport for the GitHub REST API.

    Handles:
    - Token authorization and resource-specific Accept headers
    - Page-number pagination of list endpoints
    - Optional exponential backoff with jitter for retries
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            token: GitHub token, sent as "token <value>"
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            user_agent: User-Agent header value
            http_transport: Custom httpx transport (used by tests)
        """
        super().__init__(retry_config)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=auth_headers(token, user_agent),
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
    ) -> Any:
        """
        GET a resource and decode its JSON body.

        Args:
            path: API path (e.g., "/repos/pingcap/tidb/projects")
            params: Query parameters
            accept: Accept header for this resource

        Returns:
            Parsed JSON response

        Raises:
            WatcherError: On network, decode or API errors
        """
        headers = {"Accept": accept} if accept else None

        def make_request() -> httpx.Response:
            log_http_request("GET", path, headers, params)
            return self._client.get(path, params=params, headers=headers)

        return self._execute_with_retry(make_request)

    def get_all_pages(
        self,
        path: str,
        accept: str | None = None,
        params: dict[str, Any] | None = None,
        per_page: int = PER_PAGE,
    ) -> list[Any]:
        """
        GET every page of a list endpoint.

        Args:
            path: API path of the collection
            accept: Accept header for this resource
            params: Extra query parameters
            per_page: Page size

        Returns:
            Items of all pages, in order
        """
        def fetch_page(page: int) -> list[Any]:
            query = {**(params or {}), "page": page, "per_page": per_page}
            return self.get_json(path, params=query, accept=accept)

        return fetch_all_pages(fetch_page, per_page)

    def iter_pages(
        self,
        path: str,
        accept: str | None = None,
        params: dict[str, Any] | None = None,
        per_page: int = PER_PAGE,
    ) -> Iterator[list[Any]]:
        """Yield the pages of a list endpoint; stop iterating to stop fetching."""

        def fetch_page(page: int) -> list[Any]:
            query = {**(params or {}), "page": page, "per_page": per_page}
            return self.get_json(path, params=query, accept=accept)

        return iter_pages(fetch_page, per_page)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response]
    ) -> Any:
        """
        Execute a request, retrying retryable errors when configured.

        Args:
            request_fn: Function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            WatcherError: On non-retryable errors or after max retries
        """
        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = request_fn()
            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise NetworkError(f"{type(e).__name__}: {e}") from e
                time.sleep(self._get_backoff_time(attempt, None))
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
            time.sleep(wait)

        raise WatcherError("UNKNOWN_ERROR", "Request failed with no error details")
