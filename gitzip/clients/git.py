"""Git data (objects and references) resource client."""

from typing import TYPE_CHECKING

from gitzip.types.repos import GitBlob, GitCommit, GitRef, GitTree, TreeEntry

if TYPE_CHECKING:
    from gitzip.transport import AsyncHTTPTransport


class GitDataClient:
    """Client for the low-level Git database endpoints."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the git data client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get_ref(self, owner: str, repo: str, ref: str) -> GitRef:
        """
        Get a reference.

        Args:
            ref: Reference without the "refs/" prefix, e.g. "heads/main"

        Raises:
            NotFoundError: If the reference does not exist
        """
        response = await self.transport.request(
            "GET", f"/repos/{owner}/{repo}/git/ref/{ref}"
        )
        data = response.data
        return GitRef(ref=data["ref"], sha=data["object"]["sha"])

    async def get_commit(self, owner: str, repo: str, sha: str) -> GitCommit:
        """Get a commit object."""
        response = await self.transport.request(
            "GET", f"/repos/{owner}/{repo}/git/commits/{sha}"
        )
        data = response.data
        return GitCommit(
            sha=data["sha"],
            tree_sha=data["tree"]["sha"],
            message=data.get("message", ""),
            parents=[parent["sha"] for parent in data.get("parents", [])],
        )

    async def create_blob(self, owner: str, repo: str, content: str) -> GitBlob:
        """
        Create a blob from base64 content.

        Args:
            content: Base64 encoded file content
        """
        response = await self.transport.request(
            "POST",
            f"/repos/{owner}/{repo}/git/blobs",
            body={"content": content, "encoding": "base64"},
        )
        return GitBlob(sha=response.data["sha"])

    async def create_tree(
        self,
        owner: str,
        repo: str,
        entries: list[TreeEntry],
        base_tree: str | None = None,
    ) -> GitTree:
        """Create a tree, optionally layered on top of ``base_tree``."""
        body: dict = {"tree": [entry.to_dict() for entry in entries]}
        if base_tree is not None:
            body["base_tree"] = base_tree

        response = await self.transport.request(
            "POST", f"/repos/{owner}/{repo}/git/trees", body=body
        )
        return GitTree(sha=response.data["sha"])

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parents: list[str],
    ) -> GitCommit:
        """Create a commit object."""
        response = await self.transport.request(
            "POST",
            f"/repos/{owner}/{repo}/git/commits",
            body={"message": message, "tree": tree, "parents": parents},
        )
        data = response.data
        return GitCommit(
            sha=data["sha"],
            tree_sha=data.get("tree", {}).get("sha", tree),
            message=data.get("message", message),
            parents=list(parents),
        )

    async def update_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        sha: str,
        force: bool = True,
    ) -> GitRef:
        """
        Point a reference at a commit.

        Args:
            ref: Reference without the "refs/" prefix, e.g. "heads/main"
            sha: Commit to point at
            force: Allow non-fast-forward updates
        """
        response = await self.transport.request(
            "PATCH",
            f"/repos/{owner}/{repo}/git/refs/{ref}",
            body={"sha": sha, "force": force},
        )
        data = response.data
        return GitRef(ref=data["ref"], sha=data["object"]["sha"])
