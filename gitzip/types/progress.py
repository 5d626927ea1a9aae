"""Publish progress log."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Severity(str, Enum):
    """Severity of a progress line."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class PublishProgress:
    """A single status line."""

    message: str
    severity: Severity = Severity.INFO
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ProgressLog:
    """
    Append-only log of progress lines.

    Listeners are called synchronously with every appended entry, in append
    order.
    """

    def __init__(self) -> None:
        self._entries: list[PublishProgress] = []
        self._listeners: list[Callable[[PublishProgress], None]] = []

    def subscribe(self, listener: Callable[[PublishProgress], None]) -> None:
        """Register a callback for new entries."""
        self._listeners.append(listener)

    def append(
        self, message: str, severity: Severity = Severity.INFO
    ) -> PublishProgress:
        """Append a line and notify listeners."""
        entry = PublishProgress(message=message, severity=severity)
        self._entries.append(entry)
        for listener in self._listeners:
            listener(entry)
        return entry

    def info(self, message: str) -> PublishProgress:
        return self.append(message, Severity.INFO)

    def success(self, message: str) -> PublishProgress:
        return self.append(message, Severity.SUCCESS)

    def error(self, message: str) -> PublishProgress:
        return self.append(message, Severity.ERROR)

    @property
    def entries(self) -> list[PublishProgress]:
        """Snapshot of the entries appended so far."""
        return list(self._entries)

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self._entries]

    def __iter__(self) -> Iterator[PublishProgress]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
