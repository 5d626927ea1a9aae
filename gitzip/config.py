"""
Runtime configuration.

Values come from explicit arguments or, through ``Settings.from_env``, from
environment variables. The generative-text API key is supplied at
configuration time and is never edited from inside the wizard.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gitzip.exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"
DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_TIMEOUT = 30.0
DEFAULT_BATCH_SIZE = 5


@dataclass
class Settings:
    """Configuration shared by the wizard and its collaborators."""

    genai_api_key: str | None = None
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create settings from environment variables.

        Environment variables:
            GEMINI_API_KEY: Generative-text API key (optional, falls back to API_KEY)
            GITZIP_MODEL: Completion model (optional, default: gemini-3-flash-preview)
            GITHUB_API_URL: Hosting API base URL (optional, default: https://api.github.com)
            GITZIP_HTTP_TIMEOUT: Request timeout in seconds (optional, default: 30)
            GITZIP_BATCH_SIZE: Blobs uploaded concurrently per batch (optional, default: 5)

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        return cls(
            genai_api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY"),
            model=os.environ.get("GITZIP_MODEL", DEFAULT_MODEL),
            api_url=os.environ.get("GITHUB_API_URL", DEFAULT_API_URL),
            timeout=_env_number("GITZIP_HTTP_TIMEOUT", DEFAULT_TIMEOUT, float),
            batch_size=_env_number("GITZIP_BATCH_SIZE", DEFAULT_BATCH_SIZE, int),
        )


def _env_number(name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {name}: {raw!r}") from e
