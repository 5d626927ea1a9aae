"""GitZip - publish an uploaded archive as a new hosted repository."""

from gitzip.archive import decode_archive, default_readme, suggest_repository_name
from gitzip.client import HostingClient
from gitzip.config import Settings
from gitzip.credentials import CredentialVerifier
from gitzip.exceptions import (
    ArchiveError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GenerationError,
    GitZipError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
    WizardStateError,
)
from gitzip.logging import configure_logging, get_logger
from gitzip.publisher import PublishOutcome, PublishStage, RepositoryPublisher, prepare_files
from gitzip.result import Err, ErrorKind, Ok, Result
from gitzip.session import Session
from gitzip.suggester import MetadataSuggester, apply_suggestion
from gitzip.transport import AsyncHTTPTransport
from gitzip.types import (
    CredentialScopes,
    FileRecord,
    ProgressLog,
    PublishProgress,
    RepositoryRequest,
    RepoSuggestion,
    Severity,
    UserProfile,
)
from gitzip.wizard import DeploymentWizard, Step

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Wizard
    "DeploymentWizard",
    "Step",
    # Components
    "CredentialVerifier",
    "Session",
    "RepositoryPublisher",
    "PublishOutcome",
    "PublishStage",
    "prepare_files",
    "MetadataSuggester",
    "apply_suggestion",
    "decode_archive",
    "default_readme",
    "suggest_repository_name",
    # Hosting client
    "HostingClient",
    "AsyncHTTPTransport",
    # Configuration
    "Settings",
    # Results
    "Ok",
    "Err",
    "ErrorKind",
    "Result",
    # Types
    "FileRecord",
    "RepositoryRequest",
    "CredentialScopes",
    "UserProfile",
    "ProgressLog",
    "PublishProgress",
    "Severity",
    "RepoSuggestion",
    # Exceptions
    "GitZipError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ArchiveError",
    "GenerationError",
    "WizardStateError",
    # Logging
    "configure_logging",
    "get_logger",
]
