#!/usr/bin/env python3
"""
Basic issues-watcher usage example.

Builds a snapshot against an in-memory GitHub, so it runs without a token.
Run with: python examples/basic_usage.py
"""

from datetime import datetime, timedelta, timezone

from issues_watcher import IssueFilter, WatcherClient, WatcherError, render_report
from issues_watcher.testing import (
    FakeGitHub,
    create_mock_board,
    create_mock_card,
    create_mock_column,
    create_mock_comment,
    create_mock_issue,
)

print("=== issues-watcher Basic Usage Example ===\n")

# 1. Populate a fake GitHub
print("1. Populating FakeGitHub...")
github = FakeGitHub(login="watcher-bot")
now = datetime.now(timezone.utc)
github.add_issues(
    "pingcap/parser",
    [
        create_mock_issue(1, "panic on empty input", created_at=now - timedelta(days=5)),
        create_mock_issue(2, "typo in docs", created_at=now - timedelta(hours=2)),
        create_mock_issue(3, "parse CTE", created_at=now - timedelta(days=9), assignee="alice"),
        create_mock_issue(4, "slow lexer", created_at=now - timedelta(days=4)),
    ],
)
github.add_comments("pingcap/parser", 4, [create_mock_comment("MEMBER")])
github.add_boards("pingcap/tidb", [create_mock_board(4000, 40, "SQL Infra")])
github.add_columns(4000, [create_mock_column(1, "To do"), create_mock_column(2, "Done")])
github.add_cards(1, [create_mock_card(11, note="write docs")])
print("   OK\n")

# 2. Build a snapshot
print("2. Building a snapshot...")
with WatcherClient(
    token="example-token",
    repos=["pingcap/parser"],
    projects=[
        "https://github.com/pingcap/tidb/projects/40",
        "https://github.com/pingcap/parser/projects/1",  # dropped: repo is watched
    ],
    issue_filter=IssueFilter(),
    http_transport=github.transport(),
) as client:
    print(f"   Current user: {client.get_current_user()}")
    snapshot = client.build_snapshot()
    print(f"   Snapshot at {snapshot.time.isoformat()}: {snapshot.issue_count} issue(s)")
    print(f"   Requests sent: {github.request_count()}\n")

# 3. Render the report
print("3. Report:")
for line in render_report(snapshot, IssueFilter()).splitlines():
    print(f"   {line}")

# 4. Errors
print("\n4. Error handling...")
github.fail("/repos/pingcap/parser/issues", 502, json={"message": "Bad Gateway"})
try:
    with WatcherClient("example-token", repos=["pingcap/parser"],
                       http_transport=github.transport()) as client:
        client.build_snapshot()
except WatcherError as e:
    print(f"   Caught {type(e).__name__}: {e}")

print("\n=== Done ===")
