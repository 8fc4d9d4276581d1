"""Abstract source interfaces for boilersync."""

from __future__ import annotations

from abc import ABC, abstractmethod

from boilersync.sources.models import FetchedContent, TreeEntry


class FileSource(ABC):
    """A single remote file bound to where it lives."""

    type: str

    @abstractmethod
    async def fetch(self, credential: str | None = None) -> FetchedContent:
        """Fetch the file content."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location for logs and reports."""
        ...

    @abstractmethod
    def source_id(self) -> str:
        """Identifier of the containing source, e.g. 'owner/repo'."""
        ...

    def __str__(self) -> str:
        return self.describe()


class SourceResolver(ABC):
    """Resolves a repository, path and ref to file content.

    The sync orchestrator and the glob expander depend only on this
    interface, so tests and future non-GitHub backends can stand in for the GitHub implementation.
    """

    type: str = "repository"

    @abstractmethod
    async def fetch(
        self,
        repository: str,
        path: str,
        ref: str | None = None,
        credential: str | None = None,
    ) -> FetchedContent:
        """Fetch a single file.

        Args:
            repository: Repository identifier in "owner/repo" format.
            path: File path within the repository.
            ref: Branch, tag or commit. None means the default branch.
            credential: Token used for this request, if any.
        """
        ...

    @abstractmethod
    async def resolve_ref(
        self, repository: str, ref: str | None, credential: str | None = None
    ) -> str:
        """Return ref, or the repository's default branch when ref is empty."""
        ...

    @abstractmethod
    async def list_files(
        self, repository: str, ref: str, credential: str | None = None
    ) -> list[TreeEntry]:
        """List every entry of the repository tree at ref, recursively."""
        ...

    def bind(self, repository: str, path: str, ref: str | None = None) -> RepositorySource:
        """Bind a repository path to this resolver as a FileSource."""
        return RepositorySource(self, repository, path, ref)


class RepositorySource(FileSource):
    """A file in a remote repository, fetched through a SourceResolver."""

    def __init__(
        self,
        resolver: SourceResolver,
        repository: str,
        path: str,
        ref: str | None = None,
    ) -> None:
        self.type = resolver.type
        self._resolver = resolver
        self.repository = repository
        self.path = path
        self.ref = ref
        self.resolved_ref: str | None = None

    async def fetch(self, credential: str | None = None) -> FetchedContent:
        result = await self._resolver.fetch(self.repository, self.path, self.ref, credential)
        self.resolved_ref = result.resolved_ref
        return result

    def describe(self) -> str:
        ref = self.resolved_ref or self.ref or "default"
        return f"{self.repository}@{ref}:{self.path}"

    def source_id(self) -> str:
        return self.repository
