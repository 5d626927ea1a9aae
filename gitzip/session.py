"""Authenticated hosting session."""

from typing import Any

from gitzip.client import HostingClient
from gitzip.exceptions import AuthenticationError, AuthorizationError
from gitzip.types.auth import WRITE_SCOPES, CredentialScopes, UserProfile


class Session:
    """
    A hosting client bound to a verified, write-capable identity.

    The constructor refuses credentials that failed verification or lack a
    repository-write scope, so holding a Session is proof that publishing
    is allowed.
    """

    def __init__(self, client: HostingClient, credentials: CredentialScopes) -> None:
        """
        Bind a client to verified credentials.

        Args:
            client: Hosting client authenticated with the verified token
            credentials: Result of CredentialVerifier.verify for that token

        Raises:
            AuthenticationError: If the credentials are not valid
            AuthorizationError: If no write-capable scope was granted
        """
        if not credentials.is_valid or credentials.user is None:
            raise AuthenticationError(
                "INVALID_CREDENTIALS", credentials.error or "Token Invalid"
            )
        if not credentials.can_write:
            raise AuthorizationError(
                "INSUFFICIENT_SCOPE",
                f"Token grants none of the scopes {', '.join(WRITE_SCOPES)}",
            )
        self.client = client
        self.credentials = credentials
        self._user: UserProfile = credentials.user

    @property
    def user(self) -> UserProfile:
        return self._user

    @property
    def login(self) -> str:
        return self.user.login

    @property
    def scopes(self) -> list[str]:
        return list(self.credentials.scopes)

    async def close(self) -> None:
        """Close the underlying client."""
        await self.client.close()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
