"""Issue-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from issues_watcher.refs import RepoRef


class AuthorAssociation(str, Enum):
    """Relationship of a comment or issue author to the repository."""

    OWNER = "OWNER"
    COLLABORATOR = "COLLABORATOR"
    MEMBER = "MEMBER"
    CONTRIBUTOR = "CONTRIBUTOR"
    FIRST_TIME_CONTRIBUTOR = "FIRST_TIME_CONTRIBUTOR"
    FIRST_TIMER = "FIRST_TIMER"
    MANNEQUIN = "MANNEQUIN"
    NONE = "NONE"

    @classmethod
    def parse(cls, value: str | None) -> "AuthorAssociation":
        try:
            return cls(value)
        except ValueError:
            return cls.NONE

    @property
    def is_member(self) -> bool:
        return self in _MEMBER_ASSOCIATIONS


_MEMBER_ASSOCIATIONS = frozenset(
    {
        AuthorAssociation.OWNER,
        AuthorAssociation.COLLABORATOR,
        AuthorAssociation.MEMBER,
        AuthorAssociation.CONTRIBUTOR,
    }
)


@dataclass
class Assignee:
    """User an issue is assigned to."""

    id: int
    login: str


@dataclass
class Label:
    """Issue label."""

    id: int
    name: str
    description: str | None = None


@dataclass
class PullRef:
    """Marker present on issues that are pull requests."""

    html_url: str


@dataclass
class Issue:
    """An open issue (or pull request) of a repository.

    ``owner`` and ``repo`` are not part of the API payload; they are filled in
    from the repository the issue was listed from.
    """

    number: int
    title: str
    assignee: Assignee | None
    created_at: datetime
    author_association: AuthorAssociation
    labels: list[Label] = field(default_factory=list)
    pull_request: PullRef | None = None
    comments: int = 0
    owner: str = ""
    repo: str = ""

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}/issues/{self.number}"

    def __str__(self) -> str:
        return self.html_url


@dataclass
class Comment:
    """Issue comment; only the fields needed for membership checks."""

    html_url: str
    author_association: AuthorAssociation


@dataclass
class RepoIssues:
    """All issues listed from one repository."""

    repo: RepoRef
    issues: list[Issue]
