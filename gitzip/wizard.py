"""
Deployment wizard controller.

A headless state machine behind the step-by-step publishing UI:

    AUTH -> UPLOAD -> CONFIG -> DEPLOY -> SUCCESS

From SUCCESS, deploy_another() starts over at UPLOAD with the same session.

The controller owns the wizard state and the progress log, and mutates them
only after an awaited step has completed.
"""

from collections.abc import Callable
from enum import IntEnum
from typing import Any

from gitzip.archive import decode_archive, default_readme, suggest_repository_name
from gitzip.config import Settings
from gitzip.credentials import CredentialVerifier
from gitzip.exceptions import ArchiveError, ConfigurationError, GenerationError, WizardStateError
from gitzip.logging import get_logger
from gitzip.publisher import PublishOutcome, RepositoryPublisher
from gitzip.result import Err
from gitzip.session import Session
from gitzip.suggester import MetadataSuggester, apply_suggestion
from gitzip.types.auth import UserProfile
from gitzip.types.files import FileRecord
from gitzip.types.progress import ProgressLog
from gitzip.types.repos import RepositoryRequest

logger = get_logger("wizard")

UPLOAD_FAILED_MESSAGE = "Failed to process file. Ensure it is a valid Zip."
GENERATION_FAILED_MESSAGE = "AI Generation failed. Check API Key configuration."

PublisherFactory = Callable[[Session], RepositoryPublisher]


class Step(IntEnum):
    """Wizard steps, in forward order."""

    AUTH = 0
    UPLOAD = 1
    CONFIG = 2
    DEPLOY = 3
    SUCCESS = 4


class DeploymentWizard:
    """
    Drives one user through token verification, upload, configuration and
    publishing.

    User-correctable problems (bad token, bad archive, empty name, failed
    publish) are reported through ``error`` and a False return value.
    Calling an operation from the wrong step raises WizardStateError.

    Example:
        ```python
        wizard = DeploymentWizard(Settings.from_env())
        if await wizard.connect(token):
            wizard.upload("project.zip", payload)
            await wizard.generate_metadata()
            if await wizard.deploy():
                print(wizard.deploy_url)
        await wizard.close()
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        verifier: CredentialVerifier | None = None,
        suggester: MetadataSuggester | None = None,
        publisher_factory: PublisherFactory | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.verifier = verifier or CredentialVerifier(
            base_url=self.settings.api_url, timeout=self.settings.timeout
        )
        self._suggester = suggester
        self._publisher_factory = publisher_factory or (
            lambda session: RepositoryPublisher(session, batch_size=self.settings.batch_size)
        )

        self.step = Step.AUTH
        self.session: Session | None = None
        self.files: list[FileRecord] = []
        self.request = RepositoryRequest()
        self.log = ProgressLog()
        self.error: str | None = None
        self.deploy_url: str | None = None
        self.last_outcome: PublishOutcome | None = None
        self.is_busy = False

    @property
    def user(self) -> UserProfile | None:
        return self.session.user if self.session else None

    def _require(self, *steps: Step) -> None:
        if self.step not in steps:
            allowed = ", ".join(step.name for step in steps)
            raise WizardStateError(f"Operation requires step {allowed}, wizard is at {self.step.name}")
        if self.is_busy:
            raise WizardStateError("Another operation is still in progress")

    # ------------------------------------------------------------------
    # AUTH
    # ------------------------------------------------------------------

    async def connect(self, token: str) -> bool:
        """Verify the token; on success open a session and move to UPLOAD."""
        self._require(Step.AUTH)
        if not token:
            self.error = "An access token is required"
            return False

        self.error = None
        self.is_busy = True
        try:
            result = await self.verifier.connect(token)
        finally:
            self.is_busy = False

        if isinstance(result, Err):
            self.error = result.detail
            return False

        if self.session is not None:
            await self.session.close()
        self.session = result.value
        logger.info("Connected as %s", self.session.login)
        self.step = Step.UPLOAD
        return True

    # ------------------------------------------------------------------
    # UPLOAD
    # ------------------------------------------------------------------

    def upload(self, filename: str, payload: bytes) -> bool:
        """Decode an uploaded file; on success pre-fill the config and move to CONFIG."""
        self._require(Step.UPLOAD)
        self.error = None

        try:
            files = decode_archive(filename, payload)
        except ArchiveError as e:
            logger.warning("Upload of %s rejected: %s", filename, e.message)
            self.error = UPLOAD_FAILED_MESSAGE
            return False

        if not files:
            self.error = f"{filename} contains no files"
            return False

        name = suggest_repository_name(filename)
        self.files = files
        self.request = self.request.with_changes(name=name, readme_content=default_readme(name))
        self.step = Step.CONFIG
        return True

    # ------------------------------------------------------------------
    # CONFIG
    # ------------------------------------------------------------------

    def configure(self, **changes: Any) -> RepositoryRequest:
        """Edit fields of the repository request."""
        self._require(Step.CONFIG)
        self.request = self.request.with_changes(**changes)
        return self.request

    def _get_suggester(self) -> MetadataSuggester:
        if self._suggester is None:
            self._suggester = MetadataSuggester(
                api_key=self.settings.genai_api_key, model=self.settings.model
            )
        return self._suggester

    async def generate_metadata(self) -> bool:
        """
        Ask the suggester for a name, description and README.

        On failure the current values are kept and the wizard stays in CONFIG.
        """
        self._require(Step.CONFIG)
        self.is_busy = True
        try:
            suggestion = await self._get_suggester().suggest([f.path for f in self.files])
        except (ConfigurationError, GenerationError) as e:
            logger.warning("Metadata generation failed: %s", e.message)
            self.error = GENERATION_FAILED_MESSAGE
            return False
        finally:
            self.is_busy = False

        self.error = None
        self.request = apply_suggestion(self.request, suggestion)
        return True

    # ------------------------------------------------------------------
    # DEPLOY
    # ------------------------------------------------------------------

    async def deploy(self) -> bool:
        """Publish the files; move to SUCCESS on success, stay in DEPLOY on failure."""
        self._require(Step.CONFIG)
        if not self.request.name.strip():
            self.error = "Repository name is required"
            return False
        if self.session is None:
            raise WizardStateError("No verified session")

        self.step = Step.DEPLOY
        self.error = None
        self.deploy_url = None
        self.log = ProgressLog()
        self.is_busy = True
        try:
            publisher = self._publisher_factory(self.session)
            outcome = await publisher.publish(self.request, self.files, self.log)
        except Exception as e:
            logger.error("Deployment of %s failed unexpectedly: %s", self.request.name, e)
            self.error = f"Deployment failed: {e}"
            raise
        finally:
            self.is_busy = False

        self.last_outcome = outcome
        if isinstance(outcome.result, Err):
            self.error = outcome.result.detail
            return False

        self.deploy_url = outcome.url
        self.step = Step.SUCCESS
        return True

    def return_to_config(self) -> None:
        """Leave a failed DEPLOY and go back to CONFIG."""
        self._require(Step.DEPLOY)
        if self.error is None:
            raise WizardStateError("Deployment has not failed")
        self.error = None
        self.step = Step.CONFIG

    def deploy_another(self) -> None:
        """Start a new upload in the same session after a successful deploy."""
        self._require(Step.SUCCESS)
        self.files = []
        self.request = RepositoryRequest()
        self.log = ProgressLog()
        self.error = None
        self.deploy_url = None
        self.last_outcome = None
        self.step = Step.UPLOAD

    def back(self) -> Step:
        """Go one step back: UPLOAD -> AUTH, CONFIG -> UPLOAD, failed DEPLOY -> CONFIG."""
        if self.step == Step.DEPLOY:
            self.return_to_config()
            return self.step
        self._require(Step.UPLOAD, Step.CONFIG)
        self.error = None
        self.step = Step(self.step - 1)
        return self.step

    async def close(self) -> None:
        """Release the session."""
        if self.session is not None:
            await self.session.close()
            self.session = None
