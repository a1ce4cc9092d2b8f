"""Plain-text summary of a snapshot, suitable for a chat message."""

from issues_watcher.filters import IssueFilter
from issues_watcher.types.snapshot import Snapshot


def render_report(snapshot: Snapshot, issue_filter: IssueFilter | None = None) -> str:
    """
    Render a snapshot as text.

    Lists every issue URL under a count heading, then one line per board
    column with its card count. Returns an empty string when the snapshot
    holds neither issues nor boards.
    """
    lines = []

    issues = [issue for repo in snapshot.repo_issues for issue in repo.issues]
    if issues:
        if issue_filter is not None:
            lines.append(
                f"{len(issues)} no-reply issues in {issue_filter.stale_days} days"
            )
        else:
            lines.append(f"{len(issues)} open issues")
        lines.extend(str(issue) for issue in issues)

    for board in snapshot.project_issues:
        for column in board.columns:
            lines.append(f"{board.project} {column.name}: {len(column.cards)} cards")

    return "\n".join(lines)
