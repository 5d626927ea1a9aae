"""
Repository publishing pipeline.

Publishes a set of FileRecord objects as the first real commit of a new
repository:

    existence check -> create -> resolve head -> resolve base tree
        -> upload blobs -> create tree -> create commit -> update ref

Every stage returns a Result and the pipeline stops at the first Err. There
is no rollback: blobs uploaded before a later failure stay unreferenced in
the new repository.
"""

import asyncio
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from gitzip.clients.git import GitDataClient
from gitzip.config import DEFAULT_BATCH_SIZE, DEFAULT_WEB_URL
from gitzip.exceptions import (
    ConflictError,
    GitZipError,
    NotFoundError,
    ValidationError,
)
from gitzip.logging import get_logger, log_publish_stage
from gitzip.result import Err, ErrorKind, Ok, Result
from gitzip.session import Session
from gitzip.types.files import FileRecord
from gitzip.types.progress import ProgressLog, PublishProgress
from gitzip.types.repos import GitRef, Repository, RepositoryRequest, TreeEntry

T = TypeVar("T")

logger = get_logger("publish")

DEFAULT_COMMIT_MESSAGE = "Deploy from GitZip AI Deployer"
README_PATH = "README.md"
FALLBACK_BRANCHES = ("main", "master")


class PublishStage(str, Enum):
    """Stages of one publish attempt, in execution order."""

    CHECK_EXISTS = "check_exists"
    CREATE = "create"
    RESOLVE_HEAD = "resolve_head"
    RESOLVE_BASE_TREE = "resolve_base_tree"
    UPLOAD_BLOBS = "upload_blobs"
    CREATE_TREE = "create_tree"
    CREATE_COMMIT = "create_commit"
    UPDATE_REF = "update_ref"


@dataclass
class PublishOutcome:
    """Result of a publish attempt plus the progress log it produced."""

    result: Result[str]
    log: list[PublishProgress] = field(default_factory=list)
    failed_stage: PublishStage | None = None

    @property
    def ok(self) -> bool:
        return isinstance(self.result, Ok)

    @property
    def url(self) -> str | None:
        """Browsable repository URL on success."""
        return self.result.value if isinstance(self.result, Ok) else None

    @property
    def error(self) -> Err | None:
        return self.result if isinstance(self.result, Err) else None


def prepare_files(
    files: Sequence[FileRecord], request: RepositoryRequest
) -> list[FileRecord]:
    """
    Apply README handling to the files about to be published.

    When the request includes a README, the first record whose path is
    "README.md" (case-insensitive) is dropped and a record synthesized from
    ``request.readme_content`` is appended.
    """
    prepared = list(files)
    if not request.include_readme:
        return prepared

    for index, record in enumerate(prepared):
        if record.path.lower() == README_PATH.lower():
            del prepared[index]
            break

    prepared.append(FileRecord.from_text(README_PATH, request.readme_content or ""))
    return prepared


def _dedupe(names: Sequence[str | None]) -> list[str]:
    result: list[str] = []
    for name in names:
        if name and name not in result:
            result.append(name)
    return result


class RepositoryPublisher:
    """
    Orchestrates the publish pipeline for one Session.

    Example:
        ```python
        publisher = RepositoryPublisher(session)
        outcome = await publisher.publish(request, files)
        if outcome.ok:
            print(outcome.url)
        ```
    """

    def __init__(
        self,
        session: Session,
        batch_size: int = DEFAULT_BATCH_SIZE,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
    ) -> None:
        """
        Initialize the publisher.

        Args:
            session: Verified, write-capable session
            batch_size: Blobs uploaded concurrently per batch
            commit_message: Message of the deploy commit
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.session = session
        self.batch_size = batch_size
        self.commit_message = commit_message

    @property
    def _git(self) -> GitDataClient:
        return self.session.client.git

    async def publish(
        self,
        request: RepositoryRequest,
        files: Sequence[FileRecord],
        log: ProgressLog | None = None,
    ) -> PublishOutcome:
        """
        Create the repository and publish ``files`` into it.

        Args:
            request: Desired repository
            files: Decoded files; README handling is applied here
            log: Progress log to append to (a fresh one by default)

        Returns:
            PublishOutcome with the repository URL or the terminating error
        """
        log = log if log is not None else ProgressLog()
        log.info(f"Initializing deployment for {request.name}...")

        stage, result = await self._run(request, files, log)

        if isinstance(result, Err):
            logger.warning(
                "Publish of %s/%s failed at %s: %s",
                self.session.login, request.name, stage.value, result.detail,
            )
            log.error(result.detail)
            return PublishOutcome(result=result, log=log.entries, failed_stage=stage)

        logger.info("Published %s/%s to %s", self.session.login, request.name, result.value)
        log.success("Deployment Successful!")
        return PublishOutcome(result=result, log=log.entries)

    async def _run(
        self,
        request: RepositoryRequest,
        files: Sequence[FileRecord],
        log: ProgressLog,
    ) -> tuple[PublishStage, Result[str]]:
        owner = self.session.login
        name = request.name.strip()

        if not name:
            return PublishStage.CHECK_EXISTS, Err(
                ErrorKind.INVALID_REQUEST, "Repository name is required"
            )

        log_publish_stage(PublishStage.CHECK_EXISTS.value, owner, name)
        available = await self._check_available(owner, name)
        if isinstance(available, Err):
            return PublishStage.CHECK_EXISTS, available

        log.info("Creating repository...")
        log_publish_stage(PublishStage.CREATE.value, owner, name)
        created = await self._create(request, name)
        if isinstance(created, Err):
            return PublishStage.CREATE, created
        repo = created.value
        url = repo.html_url or f"{DEFAULT_WEB_URL}/{owner}/{name}"
        log.success(f"Repository created: {url}")

        to_upload = prepare_files(files, request)
        log.info(f"Preparing to upload {len(to_upload)} files...")

        log.info("Getting latest commit SHA...")
        head = await self._resolve_head(owner, name, repo.default_branch)
        if isinstance(head, Err):
            return PublishStage.RESOLVE_HEAD, head
        ref = head.value
        log_publish_stage(PublishStage.RESOLVE_HEAD.value, owner, name, ref.ref)

        log.info("Getting base tree...")
        commit = await self._attempt(ErrorKind.API, self._git.get_commit(owner, name, ref.sha))
        if isinstance(commit, Err):
            return PublishStage.RESOLVE_BASE_TREE, commit
        base_tree = commit.value.tree_sha

        entries = await self._upload_blobs(owner, name, to_upload, log)
        if isinstance(entries, Err):
            return PublishStage.UPLOAD_BLOBS, entries

        log.info("Creating new file tree...")
        tree = await self._attempt(
            ErrorKind.API,
            self._git.create_tree(owner, name, entries.value, base_tree=base_tree),
        )
        if isinstance(tree, Err):
            return PublishStage.CREATE_TREE, tree

        log.info("Creating commit...")
        new_commit = await self._attempt(
            ErrorKind.API,
            self._git.create_commit(
                owner, name, self.commit_message, tree.value.sha, [ref.sha]
            ),
        )
        if isinstance(new_commit, Err):
            return PublishStage.CREATE_COMMIT, new_commit

        log.info("Updating repository reference...")
        updated = await self._attempt(
            ErrorKind.API,
            self._git.update_ref(owner, name, ref.short_name, new_commit.value.sha, force=True),
        )
        if isinstance(updated, Err):
            return PublishStage.UPDATE_REF, updated

        return PublishStage.UPDATE_REF, Ok(url)

    async def _attempt(self, kind: ErrorKind, call: Awaitable[T]) -> Result[T]:
        """Await one API call and convert its failure into an Err."""
        try:
            return Ok(await call)
        except GitZipError as e:
            return Err.from_exception(kind, e)
        except (KeyError, TypeError, ValueError) as e:
            return Err(kind, f"Unexpected response from hosting API: {e!r}")

    async def _check_available(self, owner: str, name: str) -> Result[None]:
        exists = await self._attempt(ErrorKind.API, self.session.client.repos.exists(owner, name))
        if isinstance(exists, Err):
            return exists
        if exists.value:
            return Err(ErrorKind.NAME_COLLISION, f'Repository "{name}" already exists!')
        return Ok(None)

    async def _create(self, request: RepositoryRequest, name: str) -> Result[Repository]:
        try:
            repo = await self.session.client.repos.create(
                name=name,
                description=request.description,
                private=request.is_private,
                auto_init=True,
            )
        except ValidationError as e:
            # Lost a race with another creator between the check and the create.
            if "already exists" in e.message:
                return Err(ErrorKind.NAME_COLLISION, f'Repository "{name}" already exists!')
            return Err.from_exception(ErrorKind.API, e)
        except GitZipError as e:
            return Err.from_exception(ErrorKind.API, e)
        except (KeyError, TypeError, ValueError) as e:
            return Err(ErrorKind.API, f"Unexpected response from hosting API: {e!r}")
        return Ok(repo)

    async def _resolve_head(
        self, owner: str, name: str, default_branch: str | None
    ) -> Result[GitRef]:
        """
        Find the branch the initial commit landed on.

        Tries the repository's reported default branch first, then the
        conventional names, in order.
        """
        candidates = _dedupe([default_branch, *FALLBACK_BRANCHES])
        for branch in candidates:
            try:
                return Ok(await self._git.get_ref(owner, name, f"heads/{branch}"))
            except (NotFoundError, ConflictError) as e:
                logger.debug("Ref heads/%s not resolvable: %s", branch, e.message)
            except GitZipError as e:
                return Err.from_exception(ErrorKind.API, e)
            except (KeyError, TypeError, ValueError) as e:
                return Err(ErrorKind.API, f"Unexpected response from hosting API: {e!r}")

        tried = " or ".join(f"heads/{branch}" for branch in candidates)
        return Err(ErrorKind.NO_HEAD, f"Could not find {tried}")

    async def _upload_blobs(
        self,
        owner: str,
        name: str,
        files: Sequence[FileRecord],
        log: ProgressLog,
    ) -> Result[list[TreeEntry]]:
        """
        Upload one blob per file, ``batch_size`` at a time.

        Uploads inside a batch run concurrently; the next batch starts only
        after every upload of the current one has settled. The first failure
        in input order aborts the stage.
        """
        entries: list[TreeEntry] = []
        total = len(files)

        for start in range(0, total, self.batch_size):
            batch = files[start:start + self.batch_size]
            log_publish_stage(
                PublishStage.UPLOAD_BLOBS.value, owner, name,
                f"batch {start // self.batch_size + 1}: {len(batch)} blobs",
            )
            outcomes = await asyncio.gather(
                *(self._git.create_blob(owner, name, record.content) for record in batch),
                return_exceptions=True,
            )

            for record, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    logger.error("Failed to upload blob for %s: %r", record.path, outcome)
                    reason = outcome.message if isinstance(outcome, GitZipError) else str(outcome)
                    return Err(ErrorKind.UPLOAD, f"Failed to upload {record.path}: {reason}")
                entries.append(TreeEntry(path=record.path, sha=outcome.sha))

            log.info(f"Uploaded {start + len(batch)}/{total} blobs...")

        return Ok(entries)
