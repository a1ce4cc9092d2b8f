"""
issues-watcher logging utilities.

Provides configurable logging for HTTP requests/responses and snapshot progress.
Ensures no credentials (GitHub or Slack tokens) are logged.
"""

import logging
import re
from typing import Any

# Create package loggers
_watcher_logger = logging.getLogger("issues_watcher")
_http_logger = logging.getLogger("issues_watcher.http")

# Patterns for credentials that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values ("token <value>", "Bearer <value>")
    (re.compile(r"\b(token|bearer)\s+[A-Za-z0-9_\-.]{8,}", re.IGNORECASE), r"\1 [REDACTED]"),
    # GitHub personal access tokens, classic and fine-grained
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}"), "[GITHUB_TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}"), "[GITHUB_TOKEN_REDACTED]"),
    # Slack bot, user and app tokens
    (re.compile(r"\bxox[abprs]-[A-Za-z0-9-]{10,}"), "[SLACK_TOKEN_REDACTED]"),
    # Secret/token assignments
    (re.compile(r"(secret|token|password)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = frozenset({"authorization", "token", "secret", "password"})


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure issues-watcher logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from issues_watcher.logging import configure_logging

        # Show every API request
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _watcher_logger.setLevel(level)
    _watcher_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get an issues-watcher logger.

    Args:
        name: Logger name suffix (e.g., "http", "projects"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _watcher_logger
    return logging.getLogger(f"issues_watcher.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain tokens

    Returns:
        Text with tokens replaced by redacted placeholders
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: set[str] | frozenset[str] | None = None
) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Key fragments to mask (default: authorization, token, secret, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with credentials masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL or path
        headers: Request headers (optional)
        params: Query parameters (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if params:
        log_parts.append(f"params={params}")

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
    items: int | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level.

    Args:
        status_code: HTTP status code
        url: Request URL
        elapsed_ms: Request duration in milliseconds (optional)
        items: Number of items in a list response (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if items is not None:
        log_parts.append(f"items={items}")

    _http_logger.debug(" | ".join(log_parts))


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
