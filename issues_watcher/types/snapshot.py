"""Snapshot data models."""

from dataclasses import dataclass, replace
from datetime import datetime

from issues_watcher.types.issues import RepoIssues
from issues_watcher.types.projects import ProjectIssues


@dataclass
class User:
    """Authenticated user."""

    login: str


@dataclass(frozen=True)
class Snapshot:
    """Issues and board state observed at one instant."""

    time: datetime
    repo_issues: list[RepoIssues]
    project_issues: list[ProjectIssues]

    @property
    def issue_count(self) -> int:
        return sum(len(r.issues) for r in self.repo_issues)

    def without_time(self) -> "Snapshot":
        """Copy with ``time`` zeroed, for comparing snapshot contents."""
        return replace(self, time=datetime.min)
