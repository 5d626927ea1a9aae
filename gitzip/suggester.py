"""
Repository metadata suggestions from the Gemini API.

Sends the uploaded file listing to a completion model and reads back a
repository name, a description and a README body as structured JSON.
"""

import json
from collections.abc import Sequence
from typing import Any

from google import genai
from google.genai import types

from gitzip.config import DEFAULT_MODEL
from gitzip.exceptions import ConfigurationError, GenerationError
from gitzip.logging import get_logger
from gitzip.types.repos import RepositoryRequest
from gitzip.types.suggestions import RepoSuggestion

logger = get_logger("suggest")

MAX_PATHS = 50

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "name": types.Schema(type=types.Type.STRING),
        "description": types.Schema(type=types.Type.STRING),
        "readmeContent": types.Schema(type=types.Type.STRING),
    },
    required=["name", "description", "readmeContent"],
)

_PROMPT_TEMPLATE = """\
I have a list of files that I am uploading to a GitHub repository.
Based on the file names and directory structure, please generate:
1. A creative and relevant repository name (kebab-case).
2. A short, professional description.
3. A concise README.md content summary explaining what this project likely does.

Files:
{files}

... (and {omitted} more files)
"""


def build_prompt(paths: Sequence[str], max_paths: int = MAX_PATHS) -> str:
    """
    Build the completion prompt for a file listing.

    Only the first ``max_paths`` paths are listed; the rest are counted.
    """
    listed = list(paths[:max_paths])
    omitted = max(0, len(paths) - max_paths)
    return _PROMPT_TEMPLATE.format(files="\n".join(listed), omitted=omitted)


def parse_suggestion(text: str | None) -> RepoSuggestion:
    """
    Parse the model's JSON answer.

    Raises:
        GenerationError: If the text is empty, not JSON, or misses a field
    """
    if not text:
        raise GenerationError("No response from AI")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise GenerationError("Response is not a JSON object")

    values: dict[str, str] = {}
    for key in ("name", "description", "readmeContent"):
        value = data.get(key)
        if not isinstance(value, str):
            raise GenerationError(f"Response field {key!r} is missing or not a string")
        values[key] = value

    return RepoSuggestion(
        name=values["name"],
        description=values["description"],
        readme_content=values["readmeContent"],
    )


def apply_suggestion(
    request: RepositoryRequest, suggestion: RepoSuggestion
) -> RepositoryRequest:
    """Merge non-empty suggested values over the request."""
    return request.with_changes(
        name=suggestion.name or request.name,
        description=suggestion.description or request.description,
        readme_content=suggestion.readme_content or request.readme_content,
    )


class MetadataSuggester:
    """
    Async client that proposes repository metadata for a file listing.

    Example:
        ```python
        suggester = MetadataSuggester(api_key=os.environ["GEMINI_API_KEY"])
        suggestion = await suggester.suggest([f.path for f in files])
        request = apply_suggestion(request, suggestion)
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        client: Any = None,
        max_paths: int = MAX_PATHS,
    ) -> None:
        """
        Initialize the suggester.

        Args:
            api_key: Gemini API key (ignored when ``client`` is given)
            model: Completion model name
            client: Pre-built ``genai.Client`` or compatible object
            max_paths: Number of paths included in the prompt

        Raises:
            ConfigurationError: If neither an API key nor a client is given
        """
        if client is None:
            if not api_key:
                raise ConfigurationError("A Gemini API key is required for suggestions")
            client = genai.Client(api_key=api_key)

        self.model = model
        self.max_paths = max_paths
        self._client = client

    async def suggest(self, paths: Sequence[str]) -> RepoSuggestion:
        """
        Request a name, description and README for the given paths.

        Raises:
            GenerationError: On any service or parse failure
        """
        prompt = build_prompt(paths, self.max_paths)
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.error("Gemini request failed: %r", e)
            raise GenerationError(f"Generation request failed: {e}") from e

        suggestion = parse_suggestion(getattr(response, "text", None))
        logger.info("Suggested repository name %r for %d files", suggestion.name, len(paths))
        return suggestion
