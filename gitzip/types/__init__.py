"""GitZip type definitions.

This module exports all data model types used by the package.
"""

from gitzip.types.auth import WRITE_SCOPES, CredentialScopes, UserProfile
from gitzip.types.files import FileRecord
from gitzip.types.progress import ProgressLog, PublishProgress, Severity
from gitzip.types.repos import (
    FILE_MODE,
    GitBlob,
    GitCommit,
    GitRef,
    GitTree,
    Repository,
    RepositoryRequest,
    TreeEntry,
)
from gitzip.types.suggestions import RepoSuggestion

__all__ = [
    # Files
    "FileRecord",
    # Credentials
    "WRITE_SCOPES",
    "CredentialScopes",
    "UserProfile",
    # Progress
    "ProgressLog",
    "PublishProgress",
    "Severity",
    # Repository and Git objects
    "FILE_MODE",
    "RepositoryRequest",
    "Repository",
    "GitRef",
    "GitCommit",
    "GitBlob",
    "GitTree",
    "TreeEntry",
    # Suggestions
    "RepoSuggestion",
]
