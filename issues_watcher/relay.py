"""
Slack relay.

Posts one message to a channel with chat.postMessage. No retry, no state.
"""

from typing import Any

import httpx

from issues_watcher.exceptions import NetworkError, RelayError
from issues_watcher.logging import get_logger, log_http_request, log_http_response

SLACK_API_URL = "https://slack.com/api"

logger = get_logger("relay")


class SlackRelay:
    """Sends text messages to a Slack channel."""

    def __init__(
        self,
        token: str,
        base_url: str = SLACK_API_URL,
        timeout: float = 10.0,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the relay.

        Args:
            token: Slack bot token
            base_url: Slack Web API base URL
            timeout: Request timeout in seconds
            http_transport: Custom httpx transport (used by tests)
        """
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Authorization": f"Bearer {token}"},
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "SlackRelay":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def send_message(self, channel: str, text: str) -> dict[str, Any]:
        """
        Post ``text`` to ``channel``.

        Returns:
            Slack's response body

        Raises:
            NetworkError: On transport failures
            RelayError: If Slack answers with an error
        """
        log_http_request("POST", "/chat.postMessage", params={"channel": channel})
        try:
            response = self._client.post(
                "/chat.postMessage", json={"channel": channel, "text": text}
            )
        except httpx.RequestError as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e
        log_http_response(response.status_code, str(response.request.url))

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if response.status_code >= 400 or not data.get("ok", False):
            raise RelayError(
                f"chat.postMessage failed: {data.get('error') or f'HTTP {response.status_code}'}"
            )

        logger.info("Sent %d character(s) to %s", len(text), channel)
        return data
