"""Async users resource client."""

from typing import TYPE_CHECKING

from issues_watcher.clients.users import parse_user
from issues_watcher.types.snapshot import User

if TYPE_CHECKING:
    from issues_watcher.async_transport import AsyncHTTPTransport


class AsyncUsersClient:
    """Async client for the authenticated user."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get_authenticated(self) -> User:
        """Get the user the token belongs to."""
        return parse_user(await self.transport.get_json("/user"))
