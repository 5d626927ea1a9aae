"""
GitZip logging utilities.

Provides configurable logging for HTTP requests/responses and publish stages.
Ensures no sensitive data (access tokens, API keys, file payloads) is logged.
"""

import logging
import re
from typing import Any

# Create package-specific loggers
_sdk_logger = logging.getLogger("gitzip")
_http_logger = logging.getLogger("gitzip.http")
_publish_logger = logging.getLogger("gitzip.publish")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Classic and fine-grained GitHub tokens
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    # Authorization headers
    (re.compile(r"Bearer\s+[A-Za-z0-9_\-.]{8,}", re.IGNORECASE), "Bearer [REDACTED]"),
    # Google API keys
    (re.compile(r"\bAIza[0-9A-Za-z_\-]{30,}\b"), "[API_KEY_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

# Maximum length of a blob payload shown in logs
_CONTENT_PREVIEW_LENGTH = 16
_TOKEN_PREVIEW_LENGTH = 4

_DEFAULT_SENSITIVE_KEYS = frozenset(
    {"authorization", "token", "password", "secret", "api_key", "apikey"}
)


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    publish_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure GitZip logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        publish_level: Log level for publish stages (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gitzip.logging import configure_logging

        # Enable debug logging for HTTP requests
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _publish_logger.setLevel(publish_level if publish_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a GitZip logger.

    Args:
        name: Logger name suffix (e.g., "http", "publish"). If None, returns the main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"gitzip.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces access tokens, authorization headers and API keys with
    redacted placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def truncate_token(token: str) -> str:
    """
    Truncate a token for safe logging.

    Shows only the last few characters, e.g. "...wxyz".
    """
    if len(token) <= _TOKEN_PREVIEW_LENGTH * 4:
        return "[REDACTED]"
    return f"...{token[-_TOKEN_PREVIEW_LENGTH:]}"


def truncate_content(content: str) -> str:
    """Shorten a base64 payload to a preview plus its length."""
    if len(content) <= _CONTENT_PREVIEW_LENGTH:
        return content
    return f"{content[:_CONTENT_PREVIEW_LENGTH]}...({len(content)} chars)"


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: set[str] | frozenset[str] | None = None
) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Blob ``content`` values are truncated rather than redacted so that log
    lines stay short but still show which payload was sent.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: authorization, token, password, secret, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif key_lower == "content" and isinstance(value, str):
            result[key] = truncate_content(value)
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
    body: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with sensitive data masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers (optional)
        body: Request body (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_http_response(
    status_code: int,
    url: str,
    body: Any = None,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level with sensitive data masked.

    Args:
        status_code: HTTP status code
        url: Request URL
        body: Response body (optional)
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if isinstance(body, dict) and body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_publish_stage(stage: str, owner: str, repo: str, detail: str | None = None) -> None:
    """
    Log a publish pipeline stage at DEBUG level.

    Args:
        stage: Stage name (e.g., "create", "upload_blobs")
        owner: Repository owner login
        repo: Repository name
        detail: Extra context (optional)
    """
    if not _publish_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{stage}: {owner}/{repo}"]
    if detail:
        log_parts.append(detail)

    _publish_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_token",
    "truncate_content",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_publish_stage",
]
