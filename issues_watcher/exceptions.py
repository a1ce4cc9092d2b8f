"""issues-watcher exception classes."""


class WatcherError(Exception):
    """Base exception for all issues-watcher errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(WatcherError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class MalformedReferenceError(WatcherError):
    """Raised when a repository or project reference cannot be parsed."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__("MALFORMED_REFERENCE", f"{raw!r}: {reason}")
        self.raw = raw


class NetworkError(WatcherError):
    """Raised on transport-level failures (DNS, connect, read timeouts)."""

    def __init__(self, message: str) -> None:
        super().__init__("NETWORK_FAILURE", message)


class DecodeError(WatcherError):
    """Raised when a response body is not JSON or has an unexpected shape."""

    def __init__(self, message: str) -> None:
        super().__init__("DECODE_FAILURE", message)


class ProjectNotFoundError(WatcherError):
    """Raised when a board number is absent from its repository's board list."""

    def __init__(self, owner: str, repo: str, number: int) -> None:
        super().__init__(
            "PROJECT_NOT_FOUND",
            f"project #{number} not found in {owner}/{repo}",
        )
        self.owner = owner
        self.repo = repo
        self.number = number


class MissingProjectIdError(WatcherError):
    """Raised when a board is drilled into before its id was resolved."""

    def __init__(self, owner: str, repo: str, number: int) -> None:
        super().__init__(
            "MISSING_PROJECT_ID",
            f"project {owner}/{repo}#{number} has no resolved id",
        )


class APIError(WatcherError):
    """Raised on HTTP error responses from the platform API."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Raised when the token is rejected (401)."""

    pass


class AuthorizationError(APIError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(APIError):
    """Raised when a resource is not found (404)."""

    pass


class RateLimitedError(APIError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, status_code, request_id)
        self.retry_after = retry_after


class ServerError(APIError):
    """Raised on server errors (5xx)."""

    pass


class RelayError(WatcherError):
    """Raised when the messaging relay rejects a message."""

    def __init__(self, message: str) -> None:
        super().__init__("RELAY_FAILURE", message)


class SnapshotTimeoutError(WatcherError):
    """Raised when a snapshot build exceeds its deadline."""

    def __init__(self, deadline: float) -> None:
        super().__init__(
            "SNAPSHOT_TIMEOUT", f"snapshot not built within {deadline:g}s"
        )
        self.deadline = deadline
