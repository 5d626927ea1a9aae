"""
Async HTTP transport for the hosting API.

Handles bearer authentication, request logging and parsing of error
responses into typed exceptions, using the httpx async client. Every request
is made exactly once; recovery from a failure is left to the user.
"""

import time
from dataclasses import dataclass
from typing import Any

import httpx

from gitzip.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitZipError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitzip.logging import log_http_request, log_http_response

API_VERSION = "2022-11-28"


@dataclass
class APIResponse:
    """Parsed response of a successful request."""

    status_code: int
    data: Any
    headers: httpx.Headers


class AsyncHTTPTransport:
    """
    Async HTTP transport layer with bearer authentication.

    Handles:
    - Authorization and API version headers
    - Rate-limit hints (Retry-After, X-RateLimit-Reset) on errors
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Personal access token
            timeout: Request timeout in seconds
            transport: Custom httpx transport (e.g. ``httpx.MockTransport`` in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> APIResponse:
        """
        Make an authenticated request.

        Args:
            method: HTTP method
            path: API path (e.g., "/user/repos")
            params: Query parameters
            body: JSON request body (for POST/PATCH)

        Returns:
            APIResponse with parsed JSON data and response headers

        Raises:
            GitZipError: On API errors; ServerError("CONNECTION_ERROR") when
                the request could not be sent
        """
        url = f"{self.base_url}{path}"
        log_http_request(method, url, body=body)
        started = time.monotonic()

        try:
            response = await self._client.request(method, path, params=params, json=body)
        except httpx.RequestError as e:
            raise ServerError("CONNECTION_ERROR", str(e) or type(e).__name__) from e

        log_http_response(
            response.status_code, url, elapsed_ms=(time.monotonic() - started) * 1000
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)

        data = response.json() if response.content else None
        return APIResponse(response.status_code, data, response.headers)

    def _parse_error_response(self, response: httpx.Response) -> GitZipError:
        """
        Parse an error response into a typed exception.

        The hosting API reports errors as ``{"message": ..., "errors": [...]}``
        and identifies the request with the ``X-GitHub-Request-Id`` header.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate GitZipError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        details = [
            item.get("message")
            for item in data.get("errors") or []
            if isinstance(item, dict) and item.get("message")
        ]
        if details:
            message = f"{message}: {'; '.join(details)}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after(response), request_id
                )
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        else:
            return ValidationError("VALIDATION_FAILED", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        """Seconds to wait, from Retry-After or X-RateLimit-Reset."""
        retry_after_str = response.headers.get("Retry-After")
        if retry_after_str is not None:
            try:
                return int(retry_after_str)
            except ValueError:
                return 60
        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                return max(0, int(reset) - int(time.time()))
            except ValueError:
                return 60
        return 60
