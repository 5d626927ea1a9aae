"""Identity and credential verification models."""

from dataclasses import dataclass, field

# Either scope lets a classic token create repositories and push to them.
WRITE_SCOPES = ("repo", "public_repo")


@dataclass
class UserProfile:
    """Authenticated identity."""

    login: str
    name: str
    avatar_url: str


@dataclass
class CredentialScopes:
    """Outcome of one token verification attempt."""

    is_valid: bool
    scopes: list[str] = field(default_factory=list)
    user: UserProfile | None = None
    error: str | None = None

    @property
    def can_write(self) -> bool:
        """True when a repository-write-capable scope was granted."""
        return any(scope in self.scopes for scope in WRITE_SCOPES)
