"""Async issues resource client."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from issues_watcher.clients.issues import (
    comments_path,
    issues_path,
    parse_comments,
    parse_repo_issues,
)
from issues_watcher.async_transport import gather_or_cancel
from issues_watcher.filters import IssueFilter, filter_issues
from issues_watcher.logging import get_logger
from issues_watcher.refs import RepoRef
from issues_watcher.transport import MediaTypes
from issues_watcher.types.issues import Comment, Issue, RepoIssues

if TYPE_CHECKING:
    from issues_watcher.async_transport import AsyncHTTPTransport

logger = get_logger("issues")


class AsyncIssuesClient:
    """Async client for repository issues and their comments."""

    def __init__(
        self, transport: "AsyncHTTPTransport", media_types: MediaTypes | None = None
    ) -> None:
        """
        Initialize the async issues client.

        Args:
            transport: Async HTTP transport for making requests
            media_types: Accept headers to request resources with
        """
        self.transport = transport
        self.media_types = media_types or MediaTypes()

    async def list_for_repo(self, repo: RepoRef) -> RepoIssues:
        """List every open issue of a repository, unfiltered."""
        logger.debug("Listing issues of %s", repo)
        items = await self.transport.get_all_pages(
            issues_path(repo), accept=self.media_types.issues
        )
        return parse_repo_issues(repo, items)

    async def list_comments(self, issue: Issue) -> list[Comment]:
        """List every comment of an issue."""
        items = await self.transport.get_all_pages(
            comments_path(issue), accept=self.media_types.default
        )
        return parse_comments(items)

    async def count_member_comments(self, issue: Issue) -> int:
        """Number of comments on ``issue`` written by project members."""
        comments = await self.list_comments(issue)
        return sum(1 for comment in comments if comment.author_association.is_member)

    async def find_unattended(
        self,
        repo: RepoRef,
        issue_filter: IssueFilter | None = None,
        now: datetime | None = None,
    ) -> RepoIssues:
        """
        List the issues of ``repo`` that nobody on the project has picked up.

        Comment counts of the candidate issues are fetched concurrently.
        """
        issue_filter = issue_filter or IssueFilter()
        now = now or datetime.now(timezone.utc)

        listed = await self.list_for_repo(repo)
        candidates = filter_issues(listed.issues, now, issue_filter)
        if issue_filter.require_no_member_comment:
            counts = await gather_or_cancel(
                *(self.count_member_comments(issue) for issue in candidates)
            )
            candidates = [
                issue for issue, count in zip(candidates, counts) if count == 0
            ]

        logger.info(
            "%s: %d of %d issue(s) unattended", repo, len(candidates), len(listed.issues)
        )
        return RepoIssues(repo=repo, issues=candidates)
