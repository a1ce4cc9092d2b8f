"""Repository and project board references.

Turns configuration strings such as ``"pingcap/parser"`` and
``"https://github.com/pingcap/tidb/projects/40"`` into structured references.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from issues_watcher.exceptions import MalformedReferenceError

_PROJECT_URL_RE = re.compile(
    r"https://(?P<host>[^/\s]+)/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/projects/(?P<number>\d+)"
)


@dataclass(frozen=True)
class RepoRef:
    """A repository, identified by owner and name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class ProjectRef:
    """A classic project board owned by a repository.

    ``number`` is the board number visible in its URL; ``id`` is the
    platform-internal identifier, filled in by project resolution.
    """

    owner: str
    name: str
    number: int
    id: int | None = None

    @classmethod
    def empty(cls) -> "ProjectRef":
        """Sentinel returned for URLs that do not name a project board."""
        return cls(owner="", name="", number=0)

    @property
    def is_empty(self) -> bool:
        return not self.owner and not self.name and self.number == 0

    @property
    def repo(self) -> RepoRef:
        return RepoRef(self.owner, self.name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}#{self.number}"


def parse_repo_ref(raw: str) -> RepoRef:
    """
    Parse an ``"owner/name"`` string.

    Raises:
        MalformedReferenceError: Unless there are exactly two non-empty segments
    """
    parts = raw.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedReferenceError(raw, "expected 'owner/repo'")
    return RepoRef(owner=parts[0], name=parts[1])


def parse_project_ref(raw: str, strict: bool = False) -> ProjectRef:
    """
    Parse a board URL of the form ``https://<host>/<owner>/<repo>/projects/<n>``.

    Unparsable input yields ``ProjectRef.empty()`` unless ``strict`` is set,
    in which case MalformedReferenceError is raised.
    """
    match = _PROJECT_URL_RE.match(raw.strip())
    if match is None:
        if strict:
            raise MalformedReferenceError(raw, "expected a project board URL")
        return ProjectRef.empty()
    return ProjectRef(
        owner=match.group("owner"),
        name=match.group("repo"),
        number=int(match.group("number")),
    )


def select_projects(
    repos: Iterable[RepoRef], projects: Iterable[ProjectRef]
) -> list[ProjectRef]:
    """Drop projects owned by one of ``repos``; they are watched as repositories."""
    watched = set(repos)
    return [p for p in projects if p.repo not in watched]
