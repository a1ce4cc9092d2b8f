"""issues-watcher type definitions.

This module exports all data model types used by the package.
"""

from issues_watcher.types.issues import (
    Assignee,
    AuthorAssociation,
    Comment,
    Issue,
    Label,
    PullRef,
    RepoIssues,
)
from issues_watcher.types.projects import (
    Board,
    Card,
    CardKind,
    Column,
    ProjectIssues,
)
from issues_watcher.types.snapshot import Snapshot, User

__all__ = [
    # Issue types
    "Assignee",
    "AuthorAssociation",
    "Comment",
    "Issue",
    "Label",
    "PullRef",
    "RepoIssues",
    # Board types
    "Board",
    "Card",
    "CardKind",
    "Column",
    "ProjectIssues",
    # Snapshot types
    "Snapshot",
    "User",
]
