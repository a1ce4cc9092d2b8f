"""
Configuration loading.

A TOML file such as::

    github-token = "ghp_..."
    slack-token = "xoxb-..."
    slack-channel = "C0123456"
    repos = ["pingcap/parser"]
    projects = ["https://github.com/pingcap/tidb/projects/40"]

    [filter]
    stale-days = 3
    ignore-labels = ["question"]

or the ISSUES_WATCHER_* environment variables.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

from issues_watcher.exceptions import ConfigurationError
from issues_watcher.filters import DEFAULT_STALE_AFTER, IssueFilter
from issues_watcher.transport import MediaTypes

DEFAULT_GITHUB_DATA = "~/.issues-watcher"


def _string_list(data: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a list of strings")
    return tuple(value)


def _split_env(value: str | None) -> tuple[str, ...]:
    return tuple(v.strip() for v in (value or "").split(",") if v.strip())


def _parse_media_types(data: Mapping[str, Any]) -> MediaTypes:
    defaults = MediaTypes()
    return MediaTypes(
        default=data.get("default", defaults.default),
        issues=data.get("issues", defaults.issues),
        projects=data.get("projects", defaults.projects),
    )


def _parse_filter(data: Mapping[str, Any]) -> IssueFilter:
    try:
        stale_days = int(data.get("stale-days", DEFAULT_STALE_AFTER.days))
    except (TypeError, ValueError) as e:
        raise ConfigurationError("'filter.stale-days' must be an integer") from e
    return IssueFilter(
        stale_after=timedelta(days=stale_days),
        require_unassigned=bool(data.get("require-unassigned", True)),
        exclude_pull_requests=bool(data.get("exclude-pull-requests", True)),
        require_no_member_comment=bool(data.get("require-no-member-comment", True)),
        ignore_labels=frozenset(
            name.lower() for name in _string_list(data, "ignore-labels")
        ),
    )


@dataclass(frozen=True)
class Config:
    """Settings for one watcher run."""

    github_token: str
    slack_token: str = ""
    slack_channel: str = ""
    github_data: str = DEFAULT_GITHUB_DATA
    repos: tuple[str, ...] = ()
    projects: tuple[str, ...] = ()
    media_types: MediaTypes = field(default_factory=MediaTypes)
    issue_filter: IssueFilter | None = None

    @property
    def slack_enabled(self) -> bool:
        return bool(self.slack_token and self.slack_channel)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """
        Build a Config from parsed TOML.

        Raises:
            ConfigurationError: If github-token is missing or a value has the wrong type
        """
        token = data.get("github-token")
        if not isinstance(token, str) or not token:
            raise ConfigurationError("'github-token' is required")

        media_types = data.get("media-types", {})
        issue_filter = data.get("filter")
        if not isinstance(media_types, dict) or not isinstance(issue_filter, (dict, type(None))):
            raise ConfigurationError("'media-types' and 'filter' must be tables")

        return cls(
            github_token=token,
            slack_token=str(data.get("slack-token", "")),
            slack_channel=str(data.get("slack-channel", "")),
            github_data=str(data.get("github-data", DEFAULT_GITHUB_DATA)),
            repos=_string_list(data, "repos"),
            projects=_string_list(data, "projects"),
            media_types=_parse_media_types(media_types),
            issue_filter=_parse_filter(issue_filter) if issue_filter is not None else None,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """
        Load a TOML configuration file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(f"cannot read {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"invalid TOML in {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Environment variables:
            ISSUES_WATCHER_GITHUB_TOKEN: GitHub token (required)
            ISSUES_WATCHER_REPOS: Comma separated "owner/repo" list
            ISSUES_WATCHER_PROJECTS: Comma separated board URLs
            ISSUES_WATCHER_SLACK_TOKEN: Slack bot token (optional)
            ISSUES_WATCHER_SLACK_CHANNEL: Slack channel id (optional)

        Raises:
            ConfigurationError: If the token is not set
        """
        env = os.environ if environ is None else environ
        token = env.get("ISSUES_WATCHER_GITHUB_TOKEN")
        if not token:
            raise ConfigurationError("ISSUES_WATCHER_GITHUB_TOKEN environment variable not set")

        return cls(
            github_token=token,
            slack_token=env.get("ISSUES_WATCHER_SLACK_TOKEN", ""),
            slack_channel=env.get("ISSUES_WATCHER_SLACK_CHANNEL", ""),
            repos=_split_env(env.get("ISSUES_WATCHER_REPOS")),
            projects=_split_env(env.get("ISSUES_WATCHER_PROJECTS")),
        )
