"""
Archive decoding.

Turns an uploaded payload into a flat list of FileRecord objects. Zip
containers are expanded; anything else is published as a single file.
"""

import io
import re
import zipfile
import zlib

from gitzip.exceptions import ArchiveError
from gitzip.logging import get_logger
from gitzip.types.files import FileRecord

logger = get_logger("archive")

_ARCHIVE_SUFFIX = re.compile(r"\.(zip|rar|7z)$", re.IGNORECASE)
_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9-]")


def is_zip_name(filename: str) -> bool:
    """True when the payload name indicates a zip container."""
    return filename.lower().endswith(".zip")


def decode_archive(filename: str, payload: bytes) -> list[FileRecord]:
    """
    Decode an uploaded payload into file records.

    Args:
        filename: Name of the uploaded file; a ``.zip`` suffix selects archive mode
        payload: Raw uploaded bytes

    Returns:
        One record per non-directory archive entry, or a single record for
        a plain file

    Raises:
        ArchiveError: If the container is malformed, encrypted, compressed with an
            unsupported method, or holds the same path twice
    """
    if not is_zip_name(filename):
        return [FileRecord.from_bytes(filename, payload)]

    # RuntimeError also covers NotImplementedError for unsupported methods
    try:
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            records = _read_entries(archive)
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        EOFError,
        OSError,
        ValueError,
        RuntimeError,
    ) as e:
        raise ArchiveError(f"Could not read {filename}: {e}") from e

    logger.info("Decoded %d files from %s", len(records), filename)
    return records


def _read_entries(archive: zipfile.ZipFile) -> list[FileRecord]:
    records: list[FileRecord] = []
    seen: set[str] = set()
    for info in archive.infolist():
        if info.is_dir():
            continue
        if info.filename in seen:
            raise ArchiveError(f"Duplicate path in archive: {info.filename}")
        seen.add(info.filename)
        records.append(FileRecord.from_bytes(info.filename, archive.read(info)))
    return records


def suggest_repository_name(filename: str) -> str:
    """
    Derive a repository name from an uploaded file name.

    ``"My Project.zip"`` becomes ``"my-project"``.
    """
    base = _ARCHIVE_SUFFIX.sub("", filename)
    return _INVALID_NAME_CHARS.sub("-", base).lower()


def default_readme(name: str) -> str:
    """README body used until the user or the suggester provides one."""
    return f"# {name}\n\nAutomated deployment via GitZip AI."
