"""
issues-watcher async client.

Builds the same snapshots as WatcherClient, fetching independent
repositories, boards and columns concurrently.
"""

import asyncio
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import httpx

from issues_watcher.async_clients import (
    AsyncIssuesClient,
    AsyncProjectsClient,
    AsyncUsersClient,
)
from issues_watcher.async_transport import (
    DEFAULT_MAX_CONCURRENCY,
    AsyncHTTPTransport,
    gather_or_cancel,
)
from issues_watcher.client import parse_refs
from issues_watcher.config import Config
from issues_watcher.exceptions import SnapshotTimeoutError
from issues_watcher.filters import IssueFilter
from issues_watcher.logging import get_logger
from issues_watcher.refs import ProjectRef, RepoRef
from issues_watcher.transport import DEFAULT_BASE_URL, MediaTypes, RetryConfig
from issues_watcher.types.issues import RepoIssues
from issues_watcher.types.projects import ProjectIssues
from issues_watcher.types.snapshot import Snapshot

logger = get_logger()


class AsyncWatcherClient:
    """
    Async client building snapshots of repositories and project boards.

    Pagination of one collection stays sequential; different repositories,
    boards and columns are fetched concurrently, with at most
    ``max_concurrency`` requests in flight. Results keep configuration order.

    Example:
        ```python
        import asyncio
        from issues_watcher import AsyncWatcherClient

        async def main():
            async with AsyncWatcherClient(
                token="ghp_...",
                repos=["pingcap/parser"],
                max_concurrency=4,
            ) as client:
                return await client.build_snapshot(deadline=120)

        snapshot = asyncio.run(main())
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        repos: Iterable[str] = (),
        projects: Iterable[str] = (),
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        media_types: MediaTypes | None = None,
        issue_filter: IssueFilter | None = None,
        strict_refs: bool = False,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the async client.

        Args:
            token: GitHub token
            repos: "owner/repo" strings whose issues are listed
            projects: Project board URLs whose columns and cards are listed
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (default: no retry)
            media_types: Accept headers per resource family
            issue_filter: When set, snapshots only hold unattended issues
            strict_refs: Raise on unparsable board URLs instead of skipping them
            max_concurrency: Maximum number of requests in flight (default: 8)
            http_transport: Custom httpx async transport (used by tests)
        """
        self.repos, self.projects = parse_refs(repos, projects, strict=strict_refs)
        self.issue_filter = issue_filter
        self.media_types = media_types or MediaTypes()

        self._transport = AsyncHTTPTransport(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            max_concurrency=max_concurrency,
            http_transport=http_transport,
        )

        self.issues = AsyncIssuesClient(self._transport, self.media_types)
        self.project_boards = AsyncProjectsClient(self._transport, self.media_types)
        self.users = AsyncUsersClient(self._transport)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "AsyncWatcherClient":
        """Create a client from a loaded Config."""
        return cls(
            token=config.github_token,
            repos=config.repos,
            projects=config.projects,
            media_types=config.media_types,
            issue_filter=config.issue_filter,
            **kwargs,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncWatcherClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get_current_user(self) -> str:
        """Login of the user the token belongs to."""
        return (await self.users.get_authenticated()).login

    async def resolve_project_ids(self) -> None:
        """Resolve the internal id of every configured board."""
        await self.project_boards.resolve_ids(self.projects)

    async def get_repo_issues(self, repo: RepoRef, now: datetime | None = None) -> RepoIssues:
        """Issues of one repository, filtered when the client has an issue filter."""
        if self.issue_filter is None:
            return await self.issues.list_for_repo(repo)
        return await self.issues.find_unattended(repo, self.issue_filter, now)

    async def get_project_issues(self, project: ProjectRef) -> ProjectIssues:
        """Board state of one configured project."""
        if project.id is None:
            await self.project_boards.resolve_ids([project])
        return await self.project_boards.get_board(project)

    async def _build(self, time: datetime) -> Snapshot:
        # Ids are written before the fan-out so no task sees a half-resolved ref.
        # A failure anywhere cancels every other fetch before it propagates.
        if any(p.id is None for p in self.projects):
            await self.resolve_project_ids()

        repo_issues, project_issues = await gather_or_cancel(
            gather_or_cancel(*(self.get_repo_issues(repo, time) for repo in self.repos)),
            gather_or_cancel(*(self.get_project_issues(p) for p in self.projects)),
        )

        logger.info(
            "Snapshot: %d repo(s), %d project(s), %d issue(s)",
            len(repo_issues), len(project_issues), sum(len(r.issues) for r in repo_issues),
        )
        return Snapshot(
            time=time, repo_issues=list(repo_issues), project_issues=list(project_issues)
        )

    async def build_snapshot(self, deadline: float | None = None) -> Snapshot:
        """
        Build a snapshot of every configured repository and board.

        Args:
            deadline: Seconds the whole build may take; in-flight requests
                are cancelled when it expires

        Returns:
            Snapshot in configuration order

        Raises:
            SnapshotTimeoutError: If the deadline expires
        """
        time = datetime.now(timezone.utc)
        if deadline is None:
            return await self._build(time)
        try:
            return await asyncio.wait_for(self._build(time), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise SnapshotTimeoutError(deadline) from e

    get_snapshot = build_snapshot
