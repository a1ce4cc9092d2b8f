"""Shared fixtures for the issues-watcher test suite."""

from issues_watcher.testing.fixtures import (  # noqa: F401
    board_github,
    fake_github,
    make_client,
    now,
    sample_issues,
)
