"""Generated repository metadata."""

from dataclasses import dataclass


@dataclass
class RepoSuggestion:
    """Name, description and README body proposed by the generative service."""

    name: str
    description: str
    readme_content: str
