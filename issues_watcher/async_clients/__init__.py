"""issues-watcher async resource clients."""

from issues_watcher.async_clients.issues import AsyncIssuesClient
from issues_watcher.async_clients.projects import AsyncProjectsClient
from issues_watcher.async_clients.users import AsyncUsersClient

__all__ = [
    "AsyncIssuesClient",
    "AsyncProjectsClient",
    "AsyncUsersClient",
]
