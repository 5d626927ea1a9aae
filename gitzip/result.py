"""Explicit result variants for publish pipeline stages.

Each stage returns ``Ok(value)`` or ``Err(kind, detail)`` and the caller
returns early on the first ``Err`` instead of relying on exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from gitzip.exceptions import GitZipError, RateLimitedError

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure categories surfaced to the wizard."""

    CREDENTIAL = "credential"
    INSUFFICIENT_SCOPE = "insufficient_scope"
    ARCHIVE = "archive"
    NAME_COLLISION = "name_collision"
    NO_HEAD = "no_head"
    UPLOAD = "upload"
    API = "api"
    RATE_LIMITED = "rate_limited"
    GENERATION = "generation"
    INVALID_REQUEST = "invalid_request"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful stage result."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed stage result."""

    kind: ErrorKind
    detail: str

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, kind: ErrorKind, exc: Exception) -> "Err":
        """
        Build an Err from an exception raised by a lower layer.

        Rate limiting is always reported as RATE_LIMITED so the caller can
        tell the user to wait before re-submitting.
        """
        if isinstance(exc, RateLimitedError):
            return cls(
                ErrorKind.RATE_LIMITED,
                f"{exc.message} (retry after {exc.retry_after}s)",
            )
        if isinstance(exc, GitZipError):
            return cls(kind, exc.message)
        return cls(kind, str(exc) or type(exc).__name__)


Result = Union[Ok[T], Err]
