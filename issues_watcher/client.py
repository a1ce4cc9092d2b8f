"""
issues-watcher main client.

Builds point-in-time snapshots of open issues and project boards.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import httpx

from issues_watcher.clients import IssuesClient, ProjectsClient, UsersClient
from issues_watcher.config import Config
from issues_watcher.filters import IssueFilter
from issues_watcher.logging import get_logger
from issues_watcher.refs import (
    ProjectRef,
    RepoRef,
    parse_project_ref,
    parse_repo_ref,
    select_projects,
)
from issues_watcher.transport import (
    DEFAULT_BASE_URL,
    HTTPTransport,
    MediaTypes,
    RetryConfig,
)
from issues_watcher.types.issues import RepoIssues
from issues_watcher.types.projects import ProjectIssues
from issues_watcher.types.snapshot import Snapshot

logger = get_logger()


def parse_refs(
    repos: Iterable[str], projects: Iterable[str], strict: bool = False
) -> tuple[list[RepoRef], list[ProjectRef]]:
    """
    Parse configured repositories and board URLs.

    Repeated repositories are kept once. Boards owned by a configured
    repository are dropped, as are board URLs that could not be parsed
    (those raise instead when ``strict`` is set).

    Raises:
        MalformedReferenceError: On a bad repository, or a bad URL when strict
    """
    repo_refs = list(dict.fromkeys(parse_repo_ref(raw) for raw in repos))
    project_refs = []
    for raw in projects:
        ref = parse_project_ref(raw, strict=strict)
        if ref.is_empty:
            logger.warning("Ignoring unrecognised project URL %r", raw)
            continue
        project_refs.append(ref)
    return repo_refs, select_projects(repo_refs, project_refs)


class WatcherClient:
    """
    Client building snapshots of repositories and project boards.

    Example:
        ```python
        from issues_watcher import WatcherClient

        with WatcherClient(
            token="ghp_...",
            repos=["pingcap/parser"],
            projects=["https://github.com/pingcap/tidb/projects/40"],
        ) as client:
            snapshot = client.build_snapshot()
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
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

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
            http_transport: Custom httpx transport (used by tests)

        Raises:
            MalformedReferenceError: On a bad repository reference
        """
        self.repos, self.projects = parse_refs(repos, projects, strict=strict_refs)
        self.issue_filter = issue_filter
        self.media_types = media_types or MediaTypes()

        self._transport = HTTPTransport(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            http_transport=http_transport,
        )

        self.issues = IssuesClient(self._transport, self.media_types)
        self.project_boards = ProjectsClient(self._transport, self.media_types)
        self.users = UsersClient(self._transport)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "WatcherClient":
        """Create a client from a loaded Config."""
        return cls(
            token=config.github_token,
            repos=config.repos,
            projects=config.projects,
            media_types=config.media_types,
            issue_filter=config.issue_filter,
            **kwargs,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "WatcherClient":
        """
        Create a client from ISSUES_WATCHER_* environment variables.

        Raises:
            ConfigurationError: If ISSUES_WATCHER_GITHUB_TOKEN is not set
        """
        return cls.from_config(Config.from_env(), **kwargs)

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "WatcherClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get_current_user(self) -> str:
        """Login of the user the token belongs to."""
        return self.users.get_authenticated().login

    def resolve_project_ids(self) -> None:
        """
        Resolve the internal id of every configured board.

        Ids stay cached on the client's ProjectRefs.

        Raises:
            ProjectNotFoundError: If a board does not exist
        """
        self.project_boards.resolve_ids(self.projects)

    def get_repo_issues(self, repo: RepoRef, now: datetime | None = None) -> RepoIssues:
        """Issues of one repository, filtered when the client has an issue filter."""
        if self.issue_filter is None:
            return self.issues.list_for_repo(repo)
        return self.issues.find_unattended(repo, self.issue_filter, now)

    def get_project_issues(self, project: ProjectRef) -> ProjectIssues:
        """Board state of one configured project."""
        if project.id is None:
            self.project_boards.resolve_ids([project])
        return self.project_boards.get_board(project)

    def build_snapshot(self) -> Snapshot:
        """
        Build a snapshot of every configured repository and board.

        The snapshot time is taken once, before the first request. Any
        failure aborts the whole snapshot.

        Returns:
            Snapshot in configuration order
        """
        time = datetime.now(timezone.utc)
        if any(p.id is None for p in self.projects):
            self.resolve_project_ids()

        repo_issues = [self.get_repo_issues(repo, time) for repo in self.repos]
        project_issues = [self.get_project_issues(p) for p in self.projects]

        logger.info(
            "Snapshot: %d repo(s), %d project(s), %d issue(s)",
            len(repo_issues), len(project_issues), sum(len(r.issues) for r in repo_issues),
        )
        return Snapshot(time=time, repo_issues=repo_issues, project_issues=project_issues)

    get_snapshot = build_snapshot


__all__ = ["WatcherClient", "parse_refs"]
