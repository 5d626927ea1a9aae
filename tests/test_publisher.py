"""
Tests for the repository publishing pipeline.

Feature: repository-publisher
"""

import asyncio
import base64
import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gitzip.publisher import (
    DEFAULT_COMMIT_MESSAGE,
    PublishOutcome,
    PublishStage,
    RepositoryPublisher,
    prepare_files,
)
from gitzip.result import Err, ErrorKind, Ok
from gitzip.testing import FakeHostingAPI, create_file_records, create_request
from gitzip.types.files import FileRecord
from gitzip.types.progress import ProgressLog, Severity
from gitzip.types.repos import RepositoryRequest


def publish(
    fake: FakeHostingAPI,
    request: RepositoryRequest,
    files: list[FileRecord],
    batch_size: int = 5,
    log: ProgressLog | None = None,
) -> PublishOutcome:
    async def run() -> PublishOutcome:
        async with fake.session() as session:
            publisher = RepositoryPublisher(session, batch_size=batch_size)
            return await publisher.publish(request, files, log)

    return asyncio.run(run())


def uploaded_messages(outcome: PublishOutcome) -> list[str]:
    return [entry.message for entry in outcome.log if entry.message.startswith("Uploaded ")]


class TestSuccessfulPublish:
    """End-to-end publishing against the fake API."""

    def test_files_and_readme_land_on_default_branch(
        self, fake_api: FakeHostingAPI, sample_files, sample_request
    ) -> None:
        outcome = publish(fake_api, sample_request, sample_files)

        assert isinstance(outcome.result, Ok)
        assert outcome.url == "https://github.com/octocat/sample-repo"
        assert outcome.failed_stage is None

        files = fake_api.repository("sample-repo").files()
        assert files == {
            "README.md": sample_request.readme_content.encode("utf-8"),
            "main.py": b"print('hello')\n",
            "pkg/util.py": b"VALUE = 1\n",
            "assets/logo.png": b"\x89PNG\r\n\x1a\n\x00\x01",
        }

    def test_commit_has_message_and_initial_parent(
        self, fake_api: FakeHostingAPI, sample_files, sample_request
    ) -> None:
        publish(fake_api, sample_request, sample_files)

        repo = fake_api.repository("sample-repo")
        head = repo.commits[repo.refs["heads/main"]]
        initial = [sha for sha, commit in repo.commits.items() if not commit["parents"]]

        assert head["message"] == DEFAULT_COMMIT_MESSAGE
        assert head["parents"] == initial
        assert len(initial) == 1

    def test_progress_log_sequence(
        self, fake_api: FakeHostingAPI, sample_files, sample_request
    ) -> None:
        outcome = publish(fake_api, sample_request, sample_files)

        assert [entry.message for entry in outcome.log] == [
            "Initializing deployment for sample-repo...",
            "Creating repository...",
            "Repository created: https://github.com/octocat/sample-repo",
            "Preparing to upload 4 files...",
            "Getting latest commit SHA...",
            "Getting base tree...",
            "Uploaded 4/4 blobs...",
            "Creating new file tree...",
            "Creating commit...",
            "Updating repository reference...",
            "Deployment Successful!",
        ]
        assert outcome.log[2].severity == Severity.SUCCESS
        assert outcome.log[-1].severity == Severity.SUCCESS

    def test_log_listeners_see_every_entry(
        self, fake_api: FakeHostingAPI, sample_files, sample_request
    ) -> None:
        log = ProgressLog()
        seen: list[str] = []
        log.subscribe(lambda entry: seen.append(entry.message))

        outcome = publish(fake_api, sample_request, sample_files, log=log)

        assert seen == [entry.message for entry in outcome.log]
        assert log.messages == seen

    def test_repository_created_with_request_fields(
        self, fake_api: FakeHostingAPI, sample_files
    ) -> None:
        request = create_request(name="secret-thing", description="Hidden", is_private=True)

        publish(fake_api, request, sample_files)

        body = fake_api.calls_to("POST", "/user/repos")[0].body
        assert body == {
            "name": "secret-thing",
            "description": "Hidden",
            "private": True,
            "auto_init": True,
        }
        repo = fake_api.repository("secret-thing")
        assert repo.private
        assert repo.description == "Hidden"

    def test_without_readme_keeps_initial_readme(
        self, fake_api: FakeHostingAPI, sample_files
    ) -> None:
        request = create_request(include_readme=False)

        outcome = publish(fake_api, request, sample_files)

        assert outcome.ok
        files = fake_api.repository("sample-repo").files()
        assert files["README.md"] == b"# sample-repo\n"
        assert len(fake_api.calls_to("POST", r".*/git/blobs")) == 3

    def test_uploaded_readme_is_replaced(self, fake_api: FakeHostingAPI) -> None:
        files = [
            FileRecord.from_text("README.md", "# uploaded\n"),
            FileRecord.from_text("app.py", "pass\n"),
        ]
        request = create_request(readme_content="# chosen\n")

        publish(fake_api, request, files)

        assert fake_api.repository("sample-repo").files()["README.md"] == b"# chosen\n"
        blobs = [
            base64.b64decode(call.body["content"])
            for call in fake_api.calls_to("POST", r".*/git/blobs")
        ]
        assert b"# uploaded\n" not in blobs


class TestBatchedUpload:
    """Blob uploads run in bounded, ordered batches."""

    def test_batches_of_five(self, fake_api: FakeHostingAPI) -> None:
        files = create_file_records(12)
        request = create_request(include_readme=False)

        outcome = publish(fake_api, request, files, batch_size=5)

        assert uploaded_messages(outcome) == [
            "Uploaded 5/12 blobs...",
            "Uploaded 10/12 blobs...",
            "Uploaded 12/12 blobs...",
        ]
        assert 1 < fake_api.max_blobs_in_flight <= 5

    def test_batches_run_in_order(self, fake_api: FakeHostingAPI) -> None:
        files = create_file_records(12)
        request = create_request(include_readme=False)

        publish(fake_api, request, files, batch_size=5)

        sent = [call.body["content"] for call in fake_api.calls_to("POST", r".*/git/blobs")]
        assert len(sent) == 12
        for start in range(0, 12, 5):
            expected = {record.content for record in files[start:start + 5]}
            assert set(sent[start:start + 5]) == expected

    def test_tree_created_after_every_blob(self, fake_api: FakeHostingAPI) -> None:
        publish(fake_api, create_request(), create_file_records(7))

        blob_positions = fake_api.call_index("POST", r".*/git/blobs")
        tree_positions = fake_api.call_index("POST", r".*/git/trees")
        commit_positions = fake_api.call_index("POST", r".*/git/commits")
        ref_positions = fake_api.call_index("PATCH", r".*/git/refs/.*")

        assert len(tree_positions) == 1
        assert max(blob_positions) < tree_positions[0] < commit_positions[0] < ref_positions[0]

    def test_tree_entries_use_regular_file_mode(self, fake_api: FakeHostingAPI) -> None:
        publish(fake_api, create_request(include_readme=False), create_file_records(2))

        body = fake_api.calls_to("POST", r".*/git/trees")[0].body
        assert body["base_tree"]
        assert [entry["path"] for entry in body["tree"]] == [
            "src/file0.txt",
            "src/file1.txt",
        ]
        assert all(entry["mode"] == "100644" for entry in body["tree"])
        assert all(entry["type"] == "blob" for entry in body["tree"])

    def test_invalid_batch_size(self, fake_api: FakeHostingAPI) -> None:
        session = fake_api.session()

        with pytest.raises(ValueError):
            RepositoryPublisher(session, batch_size=0)

        asyncio.run(session.close())


@given(count=st.integers(min_value=0, max_value=20), batch_size=st.integers(min_value=1, max_value=6))
@settings(max_examples=30, deadline=None)
def test_one_progress_line_per_batch(count: int, batch_size: int) -> None:
    """
    Property: uploading N blobs with batch size B produces ceil(N / B)
    progress lines, the last one reporting N/N.
    """
    fake = FakeHostingAPI()
    files = create_file_records(count)

    outcome = publish(fake, create_request(include_readme=False), files, batch_size=batch_size)

    assert outcome.ok
    messages = uploaded_messages(outcome)
    assert len(messages) == math.ceil(count / batch_size)
    assert messages == [
        f"Uploaded {min(end, count)}/{count} blobs..."
        for end in range(batch_size, count + batch_size, batch_size)
    ]
    assert fake.max_blobs_in_flight <= batch_size


class TestHeadResolution:
    """Locating the branch that holds the initial commit."""

    def test_reported_default_branch_is_used(self) -> None:
        fake = FakeHostingAPI(default_branch="trunk")

        outcome = publish(fake, create_request(), create_file_records(1))

        assert outcome.ok
        assert "src/file0.txt" in fake.repository("sample-repo").files("heads/trunk")
        assert not fake.was_called("GET", r".*/git/ref/heads/main")

    def test_falls_back_to_master(self) -> None:
        fake = FakeHostingAPI(default_branch="master", report_default_branch=False)

        outcome = publish(fake, create_request(), create_file_records(1))

        assert outcome.ok
        assert fake.was_called("GET", r".*/git/ref/heads/main")
        assert "src/file0.txt" in fake.repository("sample-repo").files("heads/master")

    def test_no_head(self) -> None:
        fake = FakeHostingAPI(default_branch="trunk", report_default_branch=False)

        outcome = publish(fake, create_request(), create_file_records(3))

        assert isinstance(outcome.result, Err)
        assert outcome.result.kind == ErrorKind.NO_HEAD
        assert outcome.result.detail == "Could not find heads/main or heads/master"
        assert outcome.failed_stage == PublishStage.RESOLVE_HEAD
        assert not fake.was_called("POST", r".*/git/blobs")

    def test_server_error_on_ref_stops_immediately(self, fake_api: FakeHostingAPI) -> None:
        fake_api.fail("GET", r".*/git/ref/heads/main", 500, "Server Error")

        outcome = publish(fake_api, create_request(), create_file_records(1))

        assert outcome.error is not None
        assert outcome.error.kind == ErrorKind.API
        assert not fake_api.was_called("GET", r".*/git/ref/heads/master")


class TestFailures:
    """Each stage stops the pipeline at its first error."""

    def test_name_collision_makes_no_changes(self, sample_files, sample_request) -> None:
        fake = FakeHostingAPI(existing_repos=["sample-repo"])

        outcome = publish(fake, sample_request, sample_files)

        assert isinstance(outcome.result, Err)
        assert outcome.result.kind == ErrorKind.NAME_COLLISION
        assert outcome.result.detail == 'Repository "sample-repo" already exists!'
        assert outcome.failed_stage == PublishStage.CHECK_EXISTS
        assert fake.mutating_calls() == []
        assert outcome.log[-1].severity == Severity.ERROR
        assert outcome.log[-1].message == outcome.result.detail

    def test_create_race_is_name_collision(self, sample_files, sample_request) -> None:
        fake = FakeHostingAPI(existing_repos=["sample-repo"])
        fake.fail("GET", r"/repos/octocat/sample-repo", 404, "Not Found")

        outcome = publish(fake, sample_request, sample_files)

        assert outcome.error is not None
        assert outcome.error.kind == ErrorKind.NAME_COLLISION
        assert outcome.failed_stage == PublishStage.CREATE

    def test_empty_name_is_invalid_request(self, fake_api: FakeHostingAPI, sample_files) -> None:
        outcome = publish(fake_api, create_request(name="   "), sample_files)

        assert outcome.error is not None
        assert outcome.error.kind == ErrorKind.INVALID_REQUEST
        assert fake_api.calls == []

    def test_rate_limited_create(self, fake_api: FakeHostingAPI, sample_files) -> None:
        fake_api.fail(
            "POST",
            r"/user/repos",
            403,
            "API rate limit exceeded",
            headers={"X-RateLimit-Remaining": "0", "Retry-After": "30"},
        )

        outcome = publish(fake_api, create_request(), sample_files)

        assert outcome.error is not None
        assert outcome.error.kind == ErrorKind.RATE_LIMITED
        assert outcome.error.detail == "API rate limit exceeded (retry after 30s)"

    def test_blob_failure_names_path_and_stops(
        self, fake_api: FakeHostingAPI, sample_files, sample_request
    ) -> None:
        fake_api.fail(
            "POST",
            r".*/git/blobs",
            500,
            "boom",
            when=lambda body: base64.b64decode(body["content"]) == b"VALUE = 1\n",
        )

        outcome = publish(fake_api, sample_request, sample_files)

        assert outcome.error is not None
        assert outcome.error.kind == ErrorKind.UPLOAD
        assert outcome.error.detail == "Failed to upload pkg/util.py: boom"
        assert outcome.failed_stage == PublishStage.UPLOAD_BLOBS
        assert not fake_api.was_called("POST", r".*/git/trees")
        assert not fake_api.was_called("POST", r".*/git/commits")
        assert not fake_api.was_called("PATCH")
        assert "Deployment Successful!" not in [entry.message for entry in outcome.log]

    def test_update_ref_failure_leaves_branch_untouched(
        self, fake_api: FakeHostingAPI, sample_files, sample_request
    ) -> None:
        fake_api.fail("PATCH", r".*/git/refs/heads/main", 422, "Update is not a fast forward")

        outcome = publish(fake_api, sample_request, sample_files)

        assert outcome.error is not None
        assert outcome.error.kind == ErrorKind.API
        assert outcome.error.detail == "Update is not a fast forward"
        assert outcome.failed_stage == PublishStage.UPDATE_REF
        assert fake_api.repository("sample-repo").files() == {"README.md": b"# sample-repo\n"}


@given(
    paths=st.lists(
        st.sampled_from(["README.md", "readme.md", "ReadMe.MD", "docs/README.md", "main.py"]),
        max_size=8,
    ),
    include_readme=st.booleans(),
)
@settings(max_examples=100)
def test_prepare_files_replaces_at_most_one_readme(
    paths: list[str], include_readme: bool
) -> None:
    """
    Property: with a README requested, at most one root README record is
    removed and exactly one synthesized record is appended; without one, the
    files are unchanged.
    """
    files = [FileRecord.from_text(path, f"{index}") for index, path in enumerate(paths)]
    request = create_request(include_readme=include_readme, readme_content="# generated")

    prepared = prepare_files(files, request)

    if not include_readme:
        assert prepared == files
        return

    root_readmes = sum(1 for path in paths if path.lower() == "readme.md")
    assert len(prepared) == len(files) - min(root_readmes, 1) + 1
    assert prepared[-1] == FileRecord.from_text("README.md", "# generated")
    assert sum(1 for record in prepared if record.path.lower() == "readme.md") == (
        max(root_readmes - 1, 0) + 1
    )
