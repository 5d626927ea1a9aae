"""Users resource client."""

from typing import TYPE_CHECKING

from gitzip.types.auth import UserProfile

if TYPE_CHECKING:
    from gitzip.transport import AsyncHTTPTransport


def parse_scopes(header: str | None) -> list[str]:
    """Split an ``X-OAuth-Scopes`` header into scope names."""
    if not header:
        return []
    return [scope.strip() for scope in header.split(",") if scope.strip()]


class UsersClient:
    """Client for the authenticated-identity endpoint."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the users client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get_authenticated(self) -> tuple[UserProfile, list[str]]:
        """
        Get the identity behind the token and the scopes it grants.

        Returns:
            Tuple of the user profile and the granted scope names

        Raises:
            AuthenticationError: If the token is rejected
        """
        response = await self.transport.request("GET", "/user")

        data = response.data or {}
        login = data["login"]
        user = UserProfile(
            login=login,
            name=data.get("name") or login,
            avatar_url=data.get("avatar_url", ""),
        )
        return user, parse_scopes(response.headers.get("X-OAuth-Scopes"))
