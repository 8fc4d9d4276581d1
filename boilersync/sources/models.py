"""Pydantic models and errors for remote file sources."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class SourceError(Exception):
    """Raised when a remote file cannot be resolved.

    Carries the repository, path and ref the failure relates to so callers
    can log a precise message without parsing the text.
    """

    def __init__(
        self,
        message: str,
        *,
        repository: str | None = None,
        path: str | None = None,
        ref: str | None = None,
    ) -> None:
        self.repository = repository
        self.path = path
        self.ref = ref
        super().__init__(message)


class InvalidRepositoryError(SourceError):
    """Repository identifier is not in 'owner/repo' form."""


class SourceNotFoundError(SourceError):
    """Repository, ref or file does not exist on the remote."""


class SourceAuthError(SourceError):
    """The credential was rejected or lacks access to the repository."""


class NotAFileError(SourceError):
    """Path resolves to a directory or another non-file entry."""


class EmptyContentError(SourceError):
    """The remote returned no content for a file."""


def parse_repository(repository: str) -> tuple[str, str]:
    """Split an 'owner/repo' identifier into its two segments."""
    parts = repository.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidRepositoryError(
            f"Invalid source format: '{repository}'. Expected 'owner/repo' format.",
            repository=repository,
        )
    return parts[0], parts[1]


class FetchedContent(BaseModel):
    """Content of one remote file and the ref it was read at."""

    model_config = ConfigDict(frozen=True)

    content: str
    resolved_ref: str
    sha: str | None = None


class TreeEntry(BaseModel):
    """One item of a recursive repository tree listing."""

    model_config = ConfigDict(frozen=True)

    path: str
    type: Literal["blob", "tree", "commit"]
    sha: str | None = None
