"""issues-watcher resource clients."""

from issues_watcher.clients.issues import IssuesClient
from issues_watcher.clients.projects import ProjectsClient
from issues_watcher.clients.users import UsersClient

__all__ = [
    "IssuesClient",
    "ProjectsClient",
    "UsersClient",
]
