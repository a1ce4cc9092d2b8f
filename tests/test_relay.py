"""
Tests for the Slack relay.

Feature: issues-watcher
"""

import json

import httpx
import pytest

from issues_watcher.exceptions import NetworkError, RelayError
from issues_watcher.relay import SlackRelay


def make_relay(handler) -> tuple[SlackRelay, list[httpx.Request]]:
    sent: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return handler(request)

    return SlackRelay("xoxb-test", http_transport=httpx.MockTransport(record)), sent


def test_send_message_posts_to_channel() -> None:
    """The message is posted with chat.postMessage and a bearer token."""
    relay, sent = make_relay(lambda r: httpx.Response(200, json={"ok": True, "ts": "1.0"}))

    with relay:
        result = relay.send_message("C0123", "2 no-reply issues in 3 days")

    assert result["ok"] is True
    request = sent[0]
    assert request.method == "POST"
    assert request.url == "https://slack.com/api/chat.postMessage"
    assert request.headers["Authorization"] == "Bearer xoxb-test"
    assert json.loads(request.content) == {
        "channel": "C0123",
        "text": "2 no-reply issues in 3 days",
    }


def test_slack_error_is_relay_error() -> None:
    """Slack answers errors with HTTP 200 and ok=false."""
    relay, _ = make_relay(
        lambda r: httpx.Response(200, json={"ok": False, "error": "channel_not_found"})
    )

    with relay, pytest.raises(RelayError) as exc_info:
        relay.send_message("C0123", "hi")

    assert exc_info.value.code == "RELAY_FAILURE"
    assert "channel_not_found" in exc_info.value.message


def test_http_error_is_relay_error() -> None:
    """Non-JSON error responses are relay errors too."""
    relay, _ = make_relay(lambda r: httpx.Response(502, text="bad gateway"))

    with relay, pytest.raises(RelayError) as exc_info:
        relay.send_message("C0123", "hi")

    assert "HTTP 502" in exc_info.value.message


def test_connection_failure_is_network_error() -> None:
    """Transport failures surface as NetworkError."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    relay, _ = make_relay(refuse)

    with relay, pytest.raises(NetworkError):
        relay.send_message("C0123", "hi")
