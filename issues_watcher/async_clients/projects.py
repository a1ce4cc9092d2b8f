"""Async project boards resource client."""

from contextlib import aclosing
from dataclasses import replace
from typing import TYPE_CHECKING

from issues_watcher.async_transport import gather_or_cancel
from issues_watcher.clients.projects import (
    BoardKey,
    assign_ids,
    board_key,
    boards_path,
    cards_path,
    columns_path,
    parse_boards,
    parse_cards,
    parse_columns,
    require_id,
)
from issues_watcher.exceptions import DecodeError, ProjectNotFoundError
from issues_watcher.logging import get_logger
from issues_watcher.pagination import PER_PAGE
from issues_watcher.refs import ProjectRef
from issues_watcher.transport import MediaTypes
from issues_watcher.types.projects import Card, Column, ProjectIssues

if TYPE_CHECKING:
    from issues_watcher.async_transport import AsyncHTTPTransport

logger = get_logger("projects")


class AsyncProjectsClient:
    """Async client for classic project boards, their columns and cards."""

    def __init__(
        self, transport: "AsyncHTTPTransport", media_types: MediaTypes | None = None
    ) -> None:
        """
        Initialize the async projects client.

        Args:
            transport: Async HTTP transport for making requests
            media_types: Accept headers to request resources with
        """
        self.transport = transport
        self.media_types = media_types or MediaTypes()

    async def find_board_id(self, ref: ProjectRef) -> int:
        """
        Look up the internal id of board ``ref.number`` in its repository.

        Raises:
            ProjectNotFoundError: If the list ends without the board
        """
        pages = self.transport.iter_pages(
            boards_path(ref), accept=self.media_types.projects, per_page=PER_PAGE
        )
        async with aclosing(pages):
            async for items in pages:
                for board in parse_boards(items):
                    if board.number == ref.number:
                        logger.debug("Resolved %s to id %d", ref, board.id)
                        return board.id
        raise ProjectNotFoundError(ref.owner, ref.name, ref.number)

    async def resolve_ids(self, refs: list[ProjectRef]) -> None:
        """
        Fill in ``id`` on every unresolved project reference.

        Distinct boards are looked up concurrently; ids are only written
        once every lookup has succeeded.
        """
        keys: dict[BoardKey, ProjectRef] = {}
        for ref in refs:
            if ref.id is None:
                keys.setdefault(board_key(ref), ref)
        ids = await gather_or_cancel(
            *(self.find_board_id(ref) for ref in keys.values())
        )
        assign_ids(refs, dict(zip(keys, ids)))

    async def list_cards(self, column_id: int) -> list[Card]:
        """List every card of a column."""
        items = await self.transport.get_all_pages(
            cards_path(column_id), accept=self.media_types.projects
        )
        return parse_cards(items)

    async def list_columns(self, project: ProjectRef) -> list[Column]:
        """
        List the columns of a resolved board with their cards attached.

        Cards of all columns are fetched concurrently.

        Raises:
            MissingProjectIdError: If ``project.id`` has not been resolved
        """
        project_id = require_id(project)
        items = await self.transport.get_json(
            columns_path(project_id),
            params={"per_page": PER_PAGE},
            accept=self.media_types.projects,
        )
        if not isinstance(items, list):
            raise DecodeError(f"project {project}: expected a column list")
        columns = parse_columns(items)
        cards = await gather_or_cancel(*(self.list_cards(c.id) for c in columns))
        for column, column_cards in zip(columns, cards):
            column.cards = column_cards
        return columns

    async def get_board(self, project: ProjectRef) -> ProjectIssues:
        """Board state of one resolved project."""
        columns = await self.list_columns(project)
        logger.debug("%s: %d column(s)", project, len(columns))
        return ProjectIssues(project=replace(project), columns=columns)
