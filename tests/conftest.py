"""Shared test fixtures for boilersync."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from boilersync.config.models import BoilersyncConfig, PathPair, SourceSpec
from boilersync.sources.base import SourceResolver
from boilersync.sources.cache import BranchCache
from boilersync.sources.github import GitHubClient, GitHubSource
from boilersync.sources.models import FetchedContent, SourceNotFoundError, TreeEntry
from boilersync.sync.fs import LocalFileSystem


class FakeResolver(SourceResolver):
    """In-memory resolver that records every fetch it receives."""

    type = "fake"

    def __init__(self, files: dict[tuple[str, str], str] | None = None) -> None:
        self.files = dict(files or {})
        self.errors: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str, str | None, str | None]] = []
        self.list_calls: list[tuple[str, str, str | None]] = []

    async def fetch(self, repository, path, ref=None, credential=None):
        self.calls.append((repository, path, ref, credential))
        key = (repository, path)
        if key in self.errors:
            raise self.errors[key]
        if key not in self.files:
            raise SourceNotFoundError(
                f"File not found: {path} in {repository}@{ref or 'main'}",
                repository=repository,
                path=path,
            )
        return FetchedContent(content=self.files[key], resolved_ref=ref or "main", sha="f00d")

    async def resolve_ref(self, repository, ref, credential=None):
        return ref or "main"

    async def list_files(self, repository, ref, credential=None):
        self.list_calls.append((repository, ref, credential))
        return [TreeEntry(path=path, type="blob") for repo, path in self.files if repo == repository]


@pytest.fixture
def fake_resolver():
    return FakeResolver()


@pytest.fixture
def workspace(tmp_path):
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def local_fs(workspace):
    return LocalFileSystem(workspace)


@pytest.fixture
def sample_tree():
    """Recursive tree listing of a typical boilerplate repository."""
    blobs = [
        ".eslintrc.js",
        ".prettierrc",
        ".github/ISSUE_TEMPLATE/bug_report.md",
        ".github/ISSUE_TEMPLATE/feature_request.md",
        ".github/workflows/ci.yml",
        ".github/workflows/release.yml",
        "src/index.ts",
        "src/utils/helpers.ts",
        "configs/tsconfig.json",
        "configs/nested/config.json",
    ]
    entries = [TreeEntry(path=p, type="blob", sha=f"sha-{i}") for i, p in enumerate(blobs)]
    entries += [
        TreeEntry(path="src", type="tree"),
        TreeEntry(path=".github", type="tree"),
        TreeEntry(path=".github/ISSUE_TEMPLATE", type="tree"),
    ]
    return entries


def make_content_file(content: str, *, sha: str = "abc123", kind: str = "file") -> MagicMock:
    """Build a stand-in for a PyGithub ContentFile."""
    encoded = content.encode("utf-8")
    return MagicMock(
        type=kind,
        content="ZW5jb2RlZA==" if content else "",
        decoded_content=encoded,
        sha=sha,
    )


@pytest.fixture
def content_file():
    """Factory for PyGithub ContentFile stand-ins."""
    return make_content_file


@pytest.fixture
def mock_github_client(sample_tree):
    client = MagicMock(spec=GitHubClient)
    client.get_default_branch = AsyncMock(return_value="main")
    client.get_file = AsyncMock(return_value=make_content_file("remote content"))
    client.get_ref_sha = AsyncMock(return_value="commit-sha")
    client.get_commit_tree_sha = AsyncMock(return_value="tree-sha")
    client.list_tree = AsyncMock(return_value=sample_tree)
    return client


@pytest.fixture
def github_source(mock_github_client):
    return GitHubSource(client=mock_github_client, cache=BranchCache())


@pytest.fixture
def sample_sources():
    return [
        SourceSpec(repository="acme/boilerplate", identity_files=["a.txt", "b.txt"]),
        SourceSpec(
            repository="acme/other",
            ref="v2",
            path_pairs=[PathPair(local_path="x.txt", remote_path="y.txt")],
        ),
    ]


@pytest.fixture
def sample_config(sample_sources):
    return BoilersyncConfig(sources=sample_sources)
