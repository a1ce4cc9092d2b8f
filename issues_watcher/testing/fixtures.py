"""
Pytest fixtures for testing code built on issues-watcher.

To use them, import the fixtures in your conftest.py:

    from issues_watcher.testing.fixtures import fake_github, make_client
"""

from collections.abc import Callable, Generator, Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from issues_watcher.client import WatcherClient
from issues_watcher.testing.mock import (
    FakeGitHub,
    create_mock_board,
    create_mock_card,
    create_mock_column,
    create_mock_issue,
)

TEST_TOKEN = "test-token"


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an empty FakeGitHub."""
    return FakeGitHub()


@pytest.fixture
def make_client(
    fake_github: FakeGitHub,
) -> Generator[Callable[..., WatcherClient], None, None]:
    """
    Provide a factory of WatcherClients talking to ``fake_github``.

    Example:
        ```python
        def test_snapshot(fake_github, make_client):
            fake_github.add_issues("o/r", [create_mock_issue(1)])
            client = make_client(repos=["o/r"])
            assert client.build_snapshot().issue_count == 1
        ```
    """
    clients: list[WatcherClient] = []

    def factory(
        repos: Iterable[str] = (), projects: Iterable[str] = (), **kwargs: Any
    ) -> WatcherClient:
        client = WatcherClient(
            TEST_TOKEN, repos, projects, http_transport=fake_github.transport(), **kwargs
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def now() -> datetime:
    """A fixed instant used as the snapshot time."""
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_issues(now: datetime) -> list[dict[str, Any]]:
    """
    Issue payloads covering each filtering rule.

    Only issue 1 is unattended: it is old, unassigned and not a pull request.
    """
    old = now - timedelta(days=10)
    return [
        create_mock_issue(1, created_at=old),
        create_mock_issue(2, created_at=now - timedelta(hours=1)),
        create_mock_issue(3, created_at=old, assignee="alice"),
        create_mock_issue(4, created_at=old, pull_request=True),
    ]


@pytest.fixture
def board_github(fake_github: FakeGitHub) -> FakeGitHub:
    """
    FakeGitHub holding pingcap/tidb board 40 with two columns.

    The board has id 4000; column "To do" holds a note and an issue card,
    column "Done" is empty.
    """
    fake_github.add_boards(
        "pingcap/tidb",
        [create_mock_board(3900, 39, "Planning"), create_mock_board(4000, 40, "SQL")],
    )
    fake_github.add_columns(
        4000, [create_mock_column(1, "To do"), create_mock_column(2, "Done")]
    )
    fake_github.add_cards(
        1,
        [
            create_mock_card(11, note="write docs"),
            create_mock_card(
                12, content_url="https://api.github.com/repos/pingcap/tidb/issues/7"
            ),
        ],
    )
    return fake_github
