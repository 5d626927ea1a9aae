"""
Hosting API client.

Provides the primary interface for talking to the source-control hosting API.
"""

import os
from typing import Any

import httpx

from gitzip.clients import GitDataClient, ReposClient, UsersClient
from gitzip.config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from gitzip.exceptions import ConfigurationError
from gitzip.transport import AsyncHTTPTransport


class HostingClient:
    """
    Async client for the hosting API.

    Aggregates the resource clients over one authenticated transport.

    Example:
        ```python
        import asyncio
        from gitzip import HostingClient

        async def main():
            async with HostingClient(token="ghp_...") as client:
                user, scopes = await client.users.get_authenticated()
                repo = await client.repos.create(name="my-repo")

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = DEFAULT_API_URL
    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the hosting client.

        Args:
            token: Personal access token
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            transport: Custom httpx transport (optional)

        Raises:
            ConfigurationError: If the token is empty or not ASCII
        """
        if not token or not token.strip():
            raise ConfigurationError("An access token is required")
        if not token.isascii():
            raise ConfigurationError("Access token contains non-ASCII characters")

        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token.strip(),
            timeout=timeout,
            transport=transport,
        )

        self.users = UsersClient(self._transport)
        self.repos = ReposClient(self._transport)
        self.git = GitDataClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "HostingClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_TOKEN: Personal access token (required)
            GITHUB_API_URL: Base URL for API (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        token = os.environ.get("GITHUB_TOKEN")
        base_url = os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL)

        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "HostingClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
