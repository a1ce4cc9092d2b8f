"""
Tests for configuration loading.

Feature: issues-watcher
"""

from datetime import timedelta
from pathlib import Path

import pytest

from issues_watcher.config import DEFAULT_GITHUB_DATA, Config
from issues_watcher.exceptions import ConfigurationError
from issues_watcher.filters import IssueFilter
from issues_watcher.transport import MediaTypes

FULL_CONFIG = """
slack-token = "xoxb-123"
slack-channel = "C0123456"
github-token = "ghp_abc"
github-data = "/var/lib/watcher"
repos = ["pingcap/parser"]
projects = ["https://github.com/pingcap/tidb/projects/40"]

[media-types]
projects = "application/vnd.github+json"

[filter]
stale-days = 7
ignore-labels = ["Question"]
require-no-member-comment = false
"""


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


def test_from_file_reads_every_key(tmp_path: Path) -> None:
    """All documented keys are read from the TOML file."""
    config = Config.from_file(write_config(tmp_path, FULL_CONFIG))

    assert config.github_token == "ghp_abc"
    assert config.slack_token == "xoxb-123"
    assert config.slack_channel == "C0123456"
    assert config.slack_enabled
    assert config.github_data == "/var/lib/watcher"
    assert config.repos == ("pingcap/parser",)
    assert config.projects == ("https://github.com/pingcap/tidb/projects/40",)
    assert config.media_types == MediaTypes(projects="application/vnd.github+json")
    assert config.issue_filter == IssueFilter(
        stale_after=timedelta(days=7),
        require_no_member_comment=False,
        ignore_labels=frozenset({"question"}),
    )


def test_minimal_config_uses_defaults(tmp_path: Path) -> None:
    """Only the GitHub token is required."""
    config = Config.from_file(write_config(tmp_path, 'github-token = "t"\n'))

    assert config.repos == ()
    assert config.projects == ()
    assert config.github_data == DEFAULT_GITHUB_DATA
    assert config.media_types == MediaTypes()
    assert config.issue_filter is None
    assert not config.slack_enabled


def test_empty_filter_table_enables_default_filter(tmp_path: Path) -> None:
    """An empty [filter] table turns on filtering with default settings."""
    config = Config.from_file(write_config(tmp_path, 'github-token = "t"\n[filter]\n'))

    assert config.issue_filter == IssueFilter()


def test_missing_token_is_rejected(tmp_path: Path) -> None:
    """A configuration without github-token is invalid."""
    with pytest.raises(ConfigurationError) as exc_info:
        Config.from_file(write_config(tmp_path, 'repos = ["a/b"]\n'))

    assert exc_info.value.code == "CONFIGURATION_ERROR"


def test_repos_must_be_strings(tmp_path: Path) -> None:
    """Non-string repository entries are rejected."""
    with pytest.raises(ConfigurationError):
        Config.from_file(write_config(tmp_path, 'github-token = "t"\nrepos = [1, 2]\n'))


def test_bad_stale_days_is_rejected(tmp_path: Path) -> None:
    """stale-days must be an integer."""
    text = 'github-token = "t"\n[filter]\nstale-days = "soon"\n'

    with pytest.raises(ConfigurationError):
        Config.from_file(write_config(tmp_path, text))


def test_missing_file_is_configuration_error(tmp_path: Path) -> None:
    """An unreadable file is a configuration error."""
    with pytest.raises(ConfigurationError):
        Config.from_file(tmp_path / "absent.toml")


def test_invalid_toml_is_configuration_error(tmp_path: Path) -> None:
    """A file that is not TOML is a configuration error."""
    with pytest.raises(ConfigurationError):
        Config.from_file(write_config(tmp_path, "github-token = \n"))


def test_from_env() -> None:
    """Environment variables provide the token, references and Slack settings."""
    config = Config.from_env(
        {
            "ISSUES_WATCHER_GITHUB_TOKEN": "t",
            "ISSUES_WATCHER_REPOS": "a/b, c/d,",
            "ISSUES_WATCHER_PROJECTS": "https://github.com/pingcap/tidb/projects/40",
            "ISSUES_WATCHER_SLACK_TOKEN": "xoxb-1",
            "ISSUES_WATCHER_SLACK_CHANNEL": "C1",
        }
    )

    assert config.repos == ("a/b", "c/d")
    assert config.projects == ("https://github.com/pingcap/tidb/projects/40",)
    assert config.slack_enabled


def test_from_env_requires_token() -> None:
    """Without ISSUES_WATCHER_GITHUB_TOKEN loading fails."""
    with pytest.raises(ConfigurationError):
        Config.from_env({})
