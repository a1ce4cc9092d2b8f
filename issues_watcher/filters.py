"""
Issue filters for finding issues nobody on the project has answered.

The pipeline is pure: it only looks at fields of the listed issues. The
"no member comment" condition needs the comments of each surviving issue and
is applied by the issues clients.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from issues_watcher.types.issues import AuthorAssociation, Issue

DEFAULT_STALE_AFTER = timedelta(days=3)


@dataclass(frozen=True)
class IssueFilter:
    """Which issues count as unattended."""

    stale_after: timedelta = DEFAULT_STALE_AFTER
    require_unassigned: bool = True
    exclude_pull_requests: bool = True
    require_no_member_comment: bool = True
    ignore_labels: frozenset[str] = field(default_factory=frozenset)

    @property
    def stale_days(self) -> int:
        return self.stale_after.days


def is_member(association: AuthorAssociation | str) -> bool:
    """True for OWNER, COLLABORATOR, MEMBER and CONTRIBUTOR."""
    return AuthorAssociation.parse(association).is_member


def has_ignored_label(issue: Issue, ignore_labels: Iterable[str]) -> bool:
    ignored = {name.lower() for name in ignore_labels}
    return any(label.name.lower() in ignored for label in issue.labels)


def filter_issues(
    issues: Iterable[Issue],
    now: datetime,
    issue_filter: IssueFilter | None = None,
) -> list[Issue]:
    """
    Keep issues matching ``issue_filter``, preserving order.

    Args:
        issues: Issues as listed
        now: Reference instant for the staleness window
        issue_filter: Filter settings (default: IssueFilter())

    Returns:
        Issues older than the staleness window, and (per settings) unassigned,
        not pull requests and without an ignored label
    """
    issue_filter = issue_filter or IssueFilter()
    cutoff = now - issue_filter.stale_after

    kept = []
    for issue in issues:
        if issue.created_at > cutoff:
            continue
        if issue_filter.require_unassigned and issue.assignee is not None:
            continue
        if issue_filter.exclude_pull_requests and issue.is_pull_request:
            continue
        if issue_filter.ignore_labels and has_ignored_label(issue, issue_filter.ignore_labels):
            continue
        kept.append(issue)
    return kept
