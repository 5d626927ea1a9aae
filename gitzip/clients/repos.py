"""Repositories resource client."""

from typing import TYPE_CHECKING, Any

from gitzip.exceptions import NotFoundError
from gitzip.types.repos import Repository

if TYPE_CHECKING:
    from gitzip.transport import AsyncHTTPTransport


def _parse_repository(data: dict[str, Any]) -> Repository:
    owner = data.get("owner") or {}
    return Repository(
        name=data["name"],
        full_name=data.get("full_name", data["name"]),
        owner=owner.get("login", ""),
        html_url=data.get("html_url", ""),
        default_branch=data.get("default_branch"),
        private=bool(data.get("private", False)),
        description=data.get("description"),
    )


class ReposClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, owner: str, repo: str) -> Repository:
        """
        Get repository information.

        Raises:
            NotFoundError: If repository not found
        """
        response = await self.transport.request("GET", f"/repos/{owner}/{repo}")
        return _parse_repository(response.data)

    async def exists(self, owner: str, repo: str) -> bool:
        """
        Check whether a repository exists.

        A 404 means absent; every other failure propagates.
        """
        try:
            await self.get(owner, repo)
        except NotFoundError:
            return False
        return True

    async def create(
        self,
        name: str,
        description: str | None = None,
        private: bool = False,
        auto_init: bool = True,
    ) -> Repository:
        """
        Create a repository for the authenticated user.

        Args:
            name: Repository name
            description: Optional repository description
            private: Create a private repository
            auto_init: Create an initial commit so the default branch exists

        Returns:
            Repository object with html_url and default_branch

        Raises:
            ValidationError: If the name is invalid or already taken
        """
        body: dict[str, Any] = {
            "name": name,
            "private": private,
            "auto_init": auto_init,
        }
        if description:
            body["description"] = description

        response = await self.transport.request("POST", "/user/repos", body=body)
        return _parse_repository(response.data)
