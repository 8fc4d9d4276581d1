"""GitHub file source using PyGithub."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from github import (
    Auth,
    BadCredentialsException,
    Github,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)
from github.ContentFile import ContentFile
from github.Repository import Repository

from boilersync.sources.base import SourceResolver
from boilersync.sources.cache import BranchCache
from boilersync.sources.models import (
    EmptyContentError,
    FetchedContent,
    NotAFileError,
    SourceAuthError,
    SourceError,
    SourceNotFoundError,
    TreeEntry,
    parse_repository,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ClientFactory = Callable[[str | None], Github]


def _exception_message(exc: GithubException) -> str:
    data = exc.data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(data) if data else "unknown error"


def _translate(
    exc: GithubException,
    *,
    repository: str,
    not_found: str,
    path: str | None = None,
    ref: str | None = None,
) -> SourceError:
    """Map a PyGithub exception onto the SourceError hierarchy."""
    ctx: dict[str, Any] = {"repository": repository, "path": path, "ref": ref}
    if isinstance(exc, RateLimitExceededException):
        return SourceError(f"GitHub API rate limit exceeded while reading {repository}", **ctx)
    if isinstance(exc, BadCredentialsException) or exc.status == 401:
        return SourceAuthError(
            f"Authentication failed for {repository}. Check your token.", **ctx
        )
    if exc.status == 403:
        return SourceAuthError(
            f"Access denied to {repository}. Check that your token can read this repository.",
            **ctx,
        )
    if isinstance(exc, UnknownObjectException) or exc.status == 404:
        return SourceNotFoundError(not_found, **ctx)
    return SourceError(
        f"GitHub error for {repository} ({exc.status}): {_exception_message(exc)}", **ctx
    )


class GitHubClient:
    """Async facade over the parts of the GitHub REST API boilersync needs.

    PyGithub is synchronous, so every call runs in a worker thread via
    asyncio.to_thread(). One Github instance is kept per credential.
    """

    def __init__(
        self,
        base_url: str | None = None,
        factory: ClientFactory | None = None,
    ) -> None:
        self._base_url = base_url
        self._factory = factory or self._default_factory
        self._clients: dict[str | None, Github] = {}

    def _default_factory(self, token: str | None) -> Github:
        auth = Auth.Token(token) if token else None
        if self._base_url:
            return Github(auth=auth, base_url=self._base_url)
        return Github(auth=auth)

    def _client(self, token: str | None) -> Github:
        client = self._clients.get(token)
        if client is None:
            client = self._factory(token)
            self._clients[token] = client
        return client

    def _repo(self, repository: str, token: str | None, *, lazy: bool = True) -> Repository:
        return self._client(token).get_repo(repository, lazy=lazy)

    async def _call(
        self,
        fn: Callable[[], T],
        *,
        repository: str,
        not_found: str,
        path: str | None = None,
        ref: str | None = None,
    ) -> T:
        try:
            return await asyncio.to_thread(fn)
        except GithubException as e:
            raise _translate(
                e, repository=repository, not_found=not_found, path=path, ref=ref
            ) from e

    async def get_default_branch(self, repository: str, token: str | None = None) -> str:
        def _sync() -> str:
            return self._repo(repository, token, lazy=False).default_branch

        return await self._call(
            _sync, repository=repository, not_found=f"Repository not found: {repository}"
        )

    async def get_file(
        self, repository: str, path: str, ref: str, token: str | None = None
    ) -> ContentFile | list[ContentFile]:
        """Return the contents entry for path; a list when path is a directory."""

        def _sync() -> ContentFile | list[ContentFile]:
            return self._repo(repository, token).get_contents(path, ref=ref)

        return await self._call(
            _sync,
            repository=repository,
            not_found=f"File not found: {path} in {repository}@{ref}",
            path=path,
            ref=ref,
        )

    async def get_ref_sha(self, repository: str, ref: str, token: str | None = None) -> str:
        """Return the object SHA a fully qualified ref (``heads/x``, ``tags/y``) points at."""

        def _sync() -> str:
            return self._repo(repository, token).get_git_ref(ref).object.sha

        return await self._call(
            _sync,
            repository=repository,
            not_found=f"Ref not found: {ref} in {repository}",
            ref=ref,
        )

    async def get_commit_tree_sha(
        self, repository: str, sha: str, token: str | None = None
    ) -> str:
        def _sync() -> str:
            return self._repo(repository, token).get_git_commit(sha).tree.sha

        return await self._call(
            _sync,
            repository=repository,
            not_found=f"Commit not found: {sha} in {repository}",
            ref=sha,
        )

    async def list_tree(
        self, repository: str, sha: str, token: str | None = None
    ) -> list[TreeEntry]:
        """List every entry of the tree at sha, recursively."""

        def _sync() -> list[TreeEntry]:
            tree = self._repo(repository, token).get_git_tree(sha, recursive=True)
            return [TreeEntry(path=e.path, type=e.type, sha=e.sha) for e in tree.tree]

        return await self._call(
            _sync,
            repository=repository,
            not_found=f"Tree not found: {sha} in {repository}",
            ref=sha,
        )


class GitHubSource(SourceResolver):
    """Fetches files through the GitHub Contents API.

    Owns the default branch cache, so a run that creates one GitHubSource
    resolves each repository's default branch at most once.
    """

    type = "github"

    def __init__(
        self,
        client: GitHubClient | None = None,
        cache: BranchCache | None = None,
    ) -> None:
        self.client = client or GitHubClient()
        self.cache = cache if cache is not None else BranchCache()

    async def default_branch(self, repository: str, credential: str | None = None) -> str:
        cached = self.cache.get(repository)
        if cached:
            return cached
        branch = await self.client.get_default_branch(repository, credential)
        self.cache.set(repository, branch)
        return branch

    async def resolve_ref(
        self, repository: str, ref: str | None, credential: str | None = None
    ) -> str:
        """Return ref, or the repository's default branch when ref is empty."""
        parse_repository(repository)
        if ref:
            return ref
        return await self.default_branch(repository, credential)

    async def _tree_sha(self, repository: str, ref: str, credential: str | None) -> str:
        """Resolve ref as a branch, then as a tag, then as a commit SHA."""
        try:
            return await self.client.get_ref_sha(repository, f"heads/{ref}", credential)
        except SourceNotFoundError:
            logger.debug("%s is not a branch of %s, trying tags", ref, repository)
        try:
            return await self.client.get_ref_sha(repository, f"tags/{ref}", credential)
        except SourceNotFoundError:
            logger.debug("%s is not a tag of %s, trying commit", ref, repository)
        return await self.client.get_commit_tree_sha(repository, ref, credential)

    async def list_files(
        self, repository: str, ref: str, credential: str | None = None
    ) -> list[TreeEntry]:
        """List the tree at ref. Only a not-found moves on to the next ref kind."""
        parse_repository(repository)
        tree_sha = await self._tree_sha(repository, ref, credential)
        return await self.client.list_tree(repository, tree_sha, credential)

    async def fetch(
        self,
        repository: str,
        path: str,
        ref: str | None = None,
        credential: str | None = None,
    ) -> FetchedContent:
        resolved = await self.resolve_ref(repository, ref, credential)
        ctx = {"repository": repository, "path": path, "ref": resolved}

        data = await self.client.get_file(repository, path, resolved, credential)
        if isinstance(data, list):
            raise NotAFileError(f"Path '{path}' is a directory, not a file", **ctx)
        if data.type != "file":
            raise NotAFileError(f"Path '{path}' is a {data.type}, not a file", **ctx)
        if not data.content:
            raise EmptyContentError(f"No content returned for '{path}'", **ctx)

        try:
            content = data.decoded_content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceError(f"Path '{path}' is not valid UTF-8 text", **ctx) from e

        logger.debug("fetched %s/%s@%s (sha %s)", repository, path, resolved, data.sha)
        return FetchedContent(content=content, resolved_ref=resolved, sha=data.sha)
