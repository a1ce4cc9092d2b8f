"""issues-watcher - Snapshot open issues and project boards on GitHub."""

__version__ = "0.1.0"

from issues_watcher.async_client import AsyncWatcherClient
from issues_watcher.client import WatcherClient
from issues_watcher.config import Config
from issues_watcher.exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DecodeError,
    MalformedReferenceError,
    MissingProjectIdError,
    NetworkError,
    NotFoundError,
    ProjectNotFoundError,
    RateLimitedError,
    RelayError,
    ServerError,
    SnapshotTimeoutError,
    WatcherError,
)
from issues_watcher.filters import IssueFilter, filter_issues, is_member
from issues_watcher.logging import configure_logging, get_logger
from issues_watcher.pagination import PER_PAGE, fetch_all_pages
from issues_watcher.refs import ProjectRef, RepoRef, parse_project_ref, parse_repo_ref
from issues_watcher.relay import SlackRelay
from issues_watcher.report import render_report
from issues_watcher.transport import HTTPTransport, MediaTypes, RetryConfig

__all__ = [
    "__version__",
    # Main Clients
    "WatcherClient",
    "AsyncWatcherClient",
    "Config",
    # References
    "RepoRef",
    "ProjectRef",
    "parse_repo_ref",
    "parse_project_ref",
    # Exceptions
    "WatcherError",
    "ConfigurationError",
    "MalformedReferenceError",
    "NetworkError",
    "DecodeError",
    "ProjectNotFoundError",
    "MissingProjectIdError",
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ServerError",
    "RelayError",
    "SnapshotTimeoutError",
    # Filtering
    "IssueFilter",
    "filter_issues",
    "is_member",
    # Pagination
    "PER_PAGE",
    "fetch_all_pages",
    # Transport
    "HTTPTransport",
    "MediaTypes",
    "RetryConfig",
    # Relay and reporting
    "SlackRelay",
    "render_report",
    # Logging
    "configure_logging",
    "get_logger",
]
