"""Shared fixtures for the GitZip test suite."""

from gitzip.testing.conftest import (  # noqa: F401
    fake_api,
    fake_genai,
    fake_verifier,
    sample_files,
    sample_request,
    sample_zip,
)
