"""Project board data models."""

from dataclasses import dataclass, field
from enum import Enum

from issues_watcher.refs import ProjectRef


class CardKind(str, Enum):
    """What a card carries.

    CONTENT cards link an issue or pull request whose content is not fetched.
    """

    NOTE = "note"
    CONTENT = "content"
    OPAQUE = "opaque"


@dataclass
class Board:
    """One entry of a repository's project board list."""

    id: int
    number: int
    name: str = ""


@dataclass
class Card:
    """A card placed in a column."""

    id: int
    kind: CardKind
    note: str | None = None
    content_url: str | None = None
    archived: bool = False

    @property
    def is_opaque(self) -> bool:
        return self.kind is CardKind.OPAQUE


@dataclass
class Column:
    """A lane of a board. ``cards`` is filled after the column list is fetched."""

    id: int
    name: str
    cards: list[Card] = field(default_factory=list)


@dataclass
class ProjectIssues:
    """Board state of one project."""

    project: ProjectRef
    columns: list[Column]
