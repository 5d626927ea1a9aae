"""Repository and Git data models."""

from dataclasses import dataclass, field, replace
from typing import Any

FILE_MODE = "100644"


@dataclass
class RepositoryRequest:
    """Desired new repository, as collected by the wizard."""

    name: str = ""
    description: str = ""
    is_private: bool = False
    include_readme: bool = True
    readme_content: str = ""

    def with_changes(self, **changes: Any) -> "RepositoryRequest":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass
class Repository:
    """Repository information returned by the hosting API."""

    name: str
    full_name: str
    owner: str
    html_url: str
    default_branch: str | None
    private: bool
    description: str | None = None


@dataclass
class GitRef:
    """A branch reference and the commit it points at."""

    ref: str  # e.g. "refs/heads/main"
    sha: str

    @property
    def short_name(self) -> str:
        """Reference path without the leading "refs/" (e.g. "heads/main")."""
        return self.ref[len("refs/"):] if self.ref.startswith("refs/") else self.ref


@dataclass
class GitCommit:
    """Commit object."""

    sha: str
    tree_sha: str
    message: str = ""
    parents: list[str] = field(default_factory=list)


@dataclass
class GitBlob:
    """Created blob."""

    sha: str


@dataclass
class TreeEntry:
    """One entry of a tree submission."""

    path: str
    sha: str
    mode: str = FILE_MODE
    type: str = "blob"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass
class GitTree:
    """Created tree."""

    sha: str
