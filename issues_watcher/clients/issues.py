"""Issues resource client."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

from issues_watcher.exceptions import DecodeError
from issues_watcher.filters import IssueFilter, filter_issues
from issues_watcher.logging import get_logger
from issues_watcher.refs import RepoRef
from issues_watcher.transport import MediaTypes
from issues_watcher.types.issues import (
    Assignee,
    AuthorAssociation,
    Comment,
    Issue,
    Label,
    PullRef,
    RepoIssues,
)

if TYPE_CHECKING:
    from issues_watcher.transport import HTTPTransport

T = TypeVar("T")

logger = get_logger("issues")


def parse_time(value: str) -> datetime:
    """Parse an API timestamp ("2020-05-01T10:00:00Z") as an aware UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def decode_items(
    items: list[Any], parse: Callable[[dict[str, Any]], T], what: str
) -> list[T]:
    """Parse raw API items, turning shape mismatches into DecodeError."""
    try:
        return [parse(item) for item in items]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DecodeError(f"unexpected {what} payload: {e!r}") from e


def _parse_issue(data: dict[str, Any]) -> Issue:
    assignee = data.get("assignee")
    pull_request = data.get("pull_request")
    return Issue(
        number=int(data["number"]),
        title=data["title"],
        assignee=Assignee(id=assignee["id"], login=assignee["login"]) if assignee else None,
        created_at=parse_time(data["created_at"]),
        author_association=AuthorAssociation.parse(data.get("author_association")),
        labels=[
            Label(id=label["id"], name=label["name"], description=label.get("description"))
            for label in data.get("labels") or []
        ],
        pull_request=PullRef(html_url=pull_request.get("html_url", "")) if pull_request else None,
        comments=int(data.get("comments") or 0),
    )


def _parse_comment(data: dict[str, Any]) -> Comment:
    return Comment(
        html_url=data["html_url"],
        author_association=AuthorAssociation.parse(data.get("author_association")),
    )


def parse_repo_issues(repo: RepoRef, items: list[Any]) -> RepoIssues:
    """Decode an issue listing and fill in the repository it came from."""
    issues = decode_items(items, _parse_issue, "issue")
    for issue in issues:
        issue.owner = repo.owner
        issue.repo = repo.name
    return RepoIssues(repo=repo, issues=issues)


def parse_comments(items: list[Any]) -> list[Comment]:
    return decode_items(items, _parse_comment, "comment")


def issues_path(repo: RepoRef) -> str:
    return f"/repos/{repo.owner}/{repo.name}/issues"


def comments_path(issue: Issue) -> str:
    return f"/repos/{issue.owner}/{issue.repo}/issues/{issue.number}/comments"


class IssuesClient:
    """Client for repository issues and their comments."""

    def __init__(
        self, transport: "HTTPTransport", media_types: MediaTypes | None = None
    ) -> None:
        """
        Initialize the issues client.

        Args:
            transport: HTTP transport for making requests
            media_types: Accept headers to request resources with
        """
        self.transport = transport
        self.media_types = media_types or MediaTypes()

    def list_for_repo(self, repo: RepoRef) -> RepoIssues:
        """
        List every open issue of a repository, unfiltered.

        Pull requests are included; the issues endpoint lists both.

        Args:
            repo: Repository to list

        Returns:
            RepoIssues with owner and repo filled in on each issue
        """
        logger.debug("Listing issues of %s", repo)
        items = self.transport.get_all_pages(
            issues_path(repo), accept=self.media_types.issues
        )
        return parse_repo_issues(repo, items)

    def list_comments(self, issue: Issue) -> list[Comment]:
        """List every comment of an issue."""
        items = self.transport.get_all_pages(
            comments_path(issue), accept=self.media_types.default
        )
        return parse_comments(items)

    def count_member_comments(self, issue: Issue) -> int:
        """Number of comments on ``issue`` written by project members."""
        return sum(
            1 for comment in self.list_comments(issue)
            if comment.author_association.is_member
        )

    def find_unattended(
        self,
        repo: RepoRef,
        issue_filter: IssueFilter | None = None,
        now: datetime | None = None,
    ) -> RepoIssues:
        """
        List the issues of ``repo`` that nobody on the project has picked up.

        Args:
            repo: Repository to list
            issue_filter: Filter settings (default: IssueFilter())
            now: Reference instant for the staleness window (default: now, UTC)

        Returns:
            RepoIssues holding only the issues that pass the filter
        """
        issue_filter = issue_filter or IssueFilter()
        now = now or datetime.now(timezone.utc)

        listed = self.list_for_repo(repo)
        candidates = filter_issues(listed.issues, now, issue_filter)
        if issue_filter.require_no_member_comment:
            candidates = [
                issue for issue in candidates
                if self.count_member_comments(issue) == 0
            ]

        logger.info(
            "%s: %d of %d issue(s) unattended", repo, len(candidates), len(listed.issues)
        )
        return RepoIssues(repo=repo, issues=candidates)
