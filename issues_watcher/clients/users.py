"""Users resource client."""

from typing import TYPE_CHECKING, Any

from issues_watcher.exceptions import DecodeError
from issues_watcher.types.snapshot import User

if TYPE_CHECKING:
    from issues_watcher.transport import HTTPTransport


def parse_user(data: Any) -> User:
    if not isinstance(data, dict) or "login" not in data:
        raise DecodeError("unexpected user payload")
    return User(login=data["login"])


class UsersClient:
    """Client for the authenticated user."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the users client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get_authenticated(self) -> User:
        """
        Get the user the token belongs to.

        Raises:
            AuthenticationError: If the token is rejected
        """
        return parse_user(self.transport.get_json("/user"))
