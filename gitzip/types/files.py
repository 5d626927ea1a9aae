"""File records produced by the archive decoder."""

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class FileRecord:
    """One file to publish, with its content held as base64 text."""

    path: str
    content: str  # base64 encoded
    size: int  # raw byte count

    @classmethod
    def from_bytes(cls, path: str, data: bytes) -> "FileRecord":
        """Encode raw bytes into a record."""
        return cls(
            path=path,
            content=base64.b64encode(data).decode("ascii"),
            size=len(data),
        )

    @classmethod
    def from_text(cls, path: str, text: str) -> "FileRecord":
        """Encode UTF-8 text into a record."""
        return cls.from_bytes(path, text.encode("utf-8"))

    @property
    def data(self) -> bytes:
        """Decoded file content."""
        return base64.b64decode(self.content)
