"""
Tests for snapshot reports.

Feature: issues-watcher
"""

from datetime import datetime, timezone

from issues_watcher.clients.issues import parse_repo_issues
from issues_watcher.filters import IssueFilter
from issues_watcher.refs import ProjectRef, RepoRef
from issues_watcher.report import render_report
from issues_watcher.testing import create_mock_issue
from issues_watcher.types import Card, CardKind, Column, ProjectIssues, Snapshot

TIME = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_snapshot(numbers: list[int], columns: list[Column] | None = None) -> Snapshot:
    repo_issues = [
        parse_repo_issues(RepoRef("pingcap", "parser"), [create_mock_issue(n) for n in numbers])
    ]
    project_issues = []
    if columns is not None:
        project_issues.append(
            ProjectIssues(project=ProjectRef("pingcap", "tidb", 40, id=4000), columns=columns)
        )
    return Snapshot(time=TIME, repo_issues=repo_issues, project_issues=project_issues)


def test_report_lists_issue_urls_under_heading() -> None:
    """A filtered report names the staleness window and lists issue URLs."""
    report = render_report(make_snapshot([3, 9]), IssueFilter())

    assert report.splitlines() == [
        "2 no-reply issues in 3 days",
        "https://github.com/pingcap/parser/issues/3",
        "https://github.com/pingcap/parser/issues/9",
    ]


def test_unfiltered_report_counts_open_issues() -> None:
    """Without a filter the heading counts open issues."""
    report = render_report(make_snapshot([1]))

    assert report.splitlines()[0] == "1 open issues"


def test_report_summarises_board_columns() -> None:
    """Each board column is reported with its card count."""
    columns = [
        Column(id=1, name="To do", cards=[Card(id=1, kind=CardKind.NOTE, note="x")] * 2),
        Column(id=2, name="Done"),
    ]

    report = render_report(make_snapshot([], columns))

    assert report.splitlines() == [
        "pingcap/tidb#40 To do: 2 cards",
        "pingcap/tidb#40 Done: 0 cards",
    ]


def test_empty_snapshot_renders_nothing() -> None:
    """A snapshot with no issues and no boards gives an empty report."""
    assert render_report(make_snapshot([])) == ""
