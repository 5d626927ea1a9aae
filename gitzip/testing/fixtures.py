"""
Pytest fixtures and builders for GitZip testing.

Provides a fake hosting API, sessions bound to it and sample data.
"""

import io
import zipfile
from collections.abc import Generator, Iterable, Mapping

import pytest

from gitzip.credentials import CredentialVerifier
from gitzip.testing.mock import FakeGenAIClient, FakeHostingAPI
from gitzip.types.files import FileRecord
from gitzip.types.repos import RepositoryRequest


def build_zip(files: Mapping[str, bytes], directories: Iterable[str] = ()) -> bytes:
    """
    Build an in-memory zip archive.

    Args:
        files: Entry name to content
        directories: Extra directory entries (names ending in "/")
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for directory in directories:
            archive.writestr(zipfile.ZipInfo(directory.rstrip("/") + "/"), b"")
        for name, data in files.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def create_file_records(count: int, prefix: str = "src/file") -> list[FileRecord]:
    """Create ``count`` small distinct text records."""
    return [
        FileRecord.from_text(f"{prefix}{index}.txt", f"content of file {index}\n")
        for index in range(count)
    ]


def create_request(
    name: str = "sample-repo",
    description: str = "A sample repository",
    is_private: bool = False,
    include_readme: bool = True,
    readme_content: str = "# sample-repo\n\nPublished by GitZip.\n",
) -> RepositoryRequest:
    """Create a RepositoryRequest with sensible defaults."""
    return RepositoryRequest(
        name=name,
        description=description,
        is_private=is_private,
        include_readme=include_readme,
        readme_content=readme_content,
    )


# ============================================================================
# Fake API Fixtures
# ============================================================================


@pytest.fixture
def fake_api() -> Generator[FakeHostingAPI, None, None]:
    """
    Provide a FakeHostingAPI whose user holds the "repo" scope.

    Example:
        ```python
        def test_publish(fake_api):
            session = fake_api.session()
            ...
            assert fake_api.was_called("POST", r"/user/repos")
        ```
    """
    api = FakeHostingAPI()
    yield api
    api.reset()


@pytest.fixture
def fake_verifier(fake_api: FakeHostingAPI) -> CredentialVerifier:
    """Provide a CredentialVerifier that talks to the fake API."""
    return CredentialVerifier(transport=fake_api.transport())


@pytest.fixture
def fake_genai() -> FakeGenAIClient:
    """Provide a generative client that returns a fixed suggestion."""
    return FakeGenAIClient.returning(
        name="ai-suggested-repo",
        description="Suggested description",
        readme="# ai-suggested-repo\n\nGenerated README.",
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_files() -> list[FileRecord]:
    """Provide three sample file records."""
    return [
        FileRecord.from_text("main.py", "print('hello')\n"),
        FileRecord.from_text("pkg/util.py", "VALUE = 1\n"),
        FileRecord.from_bytes("assets/logo.png", b"\x89PNG\r\n\x1a\n\x00\x01"),
    ]


@pytest.fixture
def sample_request() -> RepositoryRequest:
    """Provide a sample RepositoryRequest."""
    return create_request()


@pytest.fixture
def sample_zip() -> bytes:
    """Provide a zip with two files and one directory entry."""
    return build_zip(
        {"project/app.py": b"print('app')\n", "project/README.md": b"# old\n"},
        directories=["project/"],
    )
