"""GitZip testing utilities.

Provides an in-memory hosting API, a fake generative client and fixtures for
testing code that uses GitZip.
"""

from gitzip.testing.fixtures import build_zip, create_file_records, create_request
from gitzip.testing.mock import (
    DEFAULT_TOKEN,
    FakeGenAIClient,
    FakeHostingAPI,
    FakeRepository,
    RecordedRequest,
)

__all__ = [
    # Fakes
    "DEFAULT_TOKEN",
    "FakeHostingAPI",
    "FakeRepository",
    "FakeGenAIClient",
    "RecordedRequest",
    # Helper functions
    "build_zip",
    "create_file_records",
    "create_request",
]
