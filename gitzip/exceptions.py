"""GitZip exception classes."""


class GitZipError(Exception):
    """Base exception for all GitZip errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitZipError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(GitZipError):
    """Raised when the access token is rejected."""

    pass


class AuthorizationError(GitZipError):
    """Raised when access is denied or the token lacks a required scope."""

    pass


class NotFoundError(GitZipError):
    """Raised when a resource is not found."""

    pass


class ConflictError(GitZipError):
    """Raised on conflicts (empty repository, ref races, etc.)."""

    pass


class RateLimitedError(GitZipError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(GitZipError):
    """Raised on validation errors (422 and other 4xx)."""

    pass


class ServerError(GitZipError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class ArchiveError(GitZipError):
    """Raised when an uploaded payload cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__("ARCHIVE_ERROR", message)


class GenerationError(GitZipError):
    """Raised when the generative-text service fails or returns bad output."""

    def __init__(self, message: str) -> None:
        super().__init__("GENERATION_ERROR", message)


class WizardStateError(GitZipError):
    """Raised when a wizard operation is invoked from the wrong step."""

    def __init__(self, message: str) -> None:
        super().__init__("WIZARD_STATE_ERROR", message)
