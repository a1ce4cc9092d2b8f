"""issues-watcher testing utilities.

Provides an in-memory GitHub and payload factories for testing applications
that use issues-watcher. Pytest fixtures live in ``issues_watcher.testing.fixtures``.
"""

from issues_watcher.testing.mock import (
    FakeGitHub,
    create_mock_board,
    create_mock_card,
    create_mock_column,
    create_mock_comment,
    create_mock_issue,
)

__all__ = [
    # Fake API
    "FakeGitHub",
    # Payload factories
    "create_mock_issue",
    "create_mock_comment",
    "create_mock_board",
    "create_mock_column",
    "create_mock_card",
]
