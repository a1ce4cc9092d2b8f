"""Project boards resource client."""

from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from issues_watcher.clients.issues import decode_items
from issues_watcher.exceptions import (
    DecodeError,
    MissingProjectIdError,
    ProjectNotFoundError,
)
from issues_watcher.logging import get_logger
from issues_watcher.pagination import PER_PAGE
from issues_watcher.refs import ProjectRef
from issues_watcher.transport import MediaTypes
from issues_watcher.types.projects import (
    Board,
    Card,
    CardKind,
    Column,
    ProjectIssues,
)

if TYPE_CHECKING:
    from issues_watcher.transport import HTTPTransport

logger = get_logger("projects")

BoardKey = tuple[str, str, int]


def _parse_board(data: dict[str, Any]) -> Board:
    return Board(id=int(data["id"]), number=int(data["number"]), name=data.get("name") or "")


def _parse_column(data: dict[str, Any]) -> Column:
    return Column(id=int(data["id"]), name=data["name"])


def _parse_card(data: Any) -> Card:
    """Decode a card; anything unrecognisable becomes an OPAQUE card."""
    if not isinstance(data, dict):
        return Card(id=0, kind=CardKind.OPAQUE)
    content_url = data.get("content_url")
    note = data.get("note")
    if content_url:
        kind = CardKind.CONTENT
    elif note is not None:
        kind = CardKind.NOTE
    else:
        kind = CardKind.OPAQUE
    return Card(
        id=int(data.get("id") or 0),
        kind=kind,
        note=note,
        content_url=content_url,
        archived=bool(data.get("archived", False)),
    )


def parse_boards(items: list[Any]) -> list[Board]:
    return decode_items(items, _parse_board, "project")


def parse_columns(items: list[Any]) -> list[Column]:
    return decode_items(items, _parse_column, "column")


def parse_cards(items: list[Any]) -> list[Card]:
    return decode_items(items, _parse_card, "card")


def board_key(ref: ProjectRef) -> BoardKey:
    return (ref.owner, ref.name, ref.number)


def boards_path(ref: ProjectRef) -> str:
    return f"/repos/{ref.owner}/{ref.name}/projects"


def columns_path(project_id: int) -> str:
    return f"/projects/{project_id}/columns"


def cards_path(column_id: int) -> str:
    return f"/projects/columns/{column_id}/cards"


def require_id(project: ProjectRef) -> int:
    if project.id is None:
        raise MissingProjectIdError(project.owner, project.name, project.number)
    return project.id


def assign_ids(refs: Iterable[ProjectRef], found: dict[BoardKey, int]) -> None:
    """Set ``id`` on every unresolved ref; all of them must have been found."""
    for ref in refs:
        if ref.id is not None:
            continue
        try:
            ref.id = found[board_key(ref)]
        except KeyError:
            raise ProjectNotFoundError(ref.owner, ref.name, ref.number) from None


class ProjectsClient:
    """Client for classic project boards, their columns and cards."""

    def __init__(
        self, transport: "HTTPTransport", media_types: MediaTypes | None = None
    ) -> None:
        """
        Initialize the projects client.

        Args:
            transport: HTTP transport for making requests
            media_types: Accept headers to request resources with
        """
        self.transport = transport
        self.media_types = media_types or MediaTypes()

    def find_board_id(self, ref: ProjectRef) -> int:
        """
        Look up the internal id of board ``ref.number`` in its repository.

        Pages through the repository's board list and stops at the first
        page containing the board.

        Raises:
            ProjectNotFoundError: If the list ends without the board
        """
        pages = self.transport.iter_pages(
            boards_path(ref), accept=self.media_types.projects, per_page=PER_PAGE
        )
        for items in pages:
            for board in parse_boards(items):
                if board.number == ref.number:
                    logger.debug("Resolved %s to id %d", ref, board.id)
                    return board.id
        raise ProjectNotFoundError(ref.owner, ref.name, ref.number)

    def resolve_ids(self, refs: list[ProjectRef]) -> None:
        """
        Fill in ``id`` on every unresolved project reference.

        References naming the same board are looked up once. Either every
        reference ends up resolved or an exception is raised.

        Raises:
            ProjectNotFoundError: If any board does not exist
        """
        found: dict[BoardKey, int] = {}
        for ref in refs:
            key = board_key(ref)
            if ref.id is None and key not in found:
                found[key] = self.find_board_id(ref)
        assign_ids(refs, found)

    def list_cards(self, column_id: int) -> list[Card]:
        """List every card of a column."""
        items = self.transport.get_all_pages(
            cards_path(column_id), accept=self.media_types.projects
        )
        return parse_cards(items)

    def list_columns(self, project: ProjectRef) -> list[Column]:
        """
        List the columns of a resolved board, each with its cards attached.

        The column list is read with a single request of PER_PAGE entries.

        Raises:
            MissingProjectIdError: If ``project.id`` has not been resolved
        """
        project_id = require_id(project)
        items = self.transport.get_json(
            columns_path(project_id),
            params={"per_page": PER_PAGE},
            accept=self.media_types.projects,
        )
        if not isinstance(items, list):
            raise DecodeError(f"project {project}: expected a column list")
        columns = parse_columns(items)
        for column in columns:
            column.cards = self.list_cards(column.id)
        return columns

    def get_board(self, project: ProjectRef) -> ProjectIssues:
        """Board state of one resolved project."""
        columns = self.list_columns(project)
        logger.debug("%s: %d column(s)", project, len(columns))
        return ProjectIssues(project=replace(project), columns=columns)
