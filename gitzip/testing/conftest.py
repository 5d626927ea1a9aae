"""
Pytest plugin for GitZip testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitzip.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from gitzip.testing.fixtures import (
    fake_api,
    fake_genai,
    fake_verifier,
    sample_files,
    sample_request,
    sample_zip,
)

__all__ = [
    "fake_api",
    "fake_genai",
    "fake_verifier",
    "sample_files",
    "sample_request",
    "sample_zip",
]
