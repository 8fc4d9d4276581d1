"""Remote file sources for boilersync."""

import os

from boilersync.config.models import BoilersyncConfig
from boilersync.sources.base import FileSource, RepositorySource, SourceResolver
from boilersync.sources.cache import BranchCache
from boilersync.sources.github import GitHubClient, GitHubSource
from boilersync.sources.glob import GlobExpander, expand_braces, is_pattern, match_path
from boilersync.sources.models import (
    EmptyContentError,
    FetchedContent,
    InvalidRepositoryError,
    NotAFileError,
    SourceAuthError,
    SourceError,
    SourceNotFoundError,
    TreeEntry,
    parse_repository,
)


def resolve_default_credential(config: BoilersyncConfig) -> str | None:
    """Return the run-wide token: source_token_env, falling back to token_env."""
    return os.environ.get(config.source_token_env) or os.environ.get(config.token_env) or None


def create_source(config: BoilersyncConfig) -> GitHubSource:
    """Create a GitHubSource with a fresh branch cache for one run."""
    client = GitHubClient(base_url=config.github_api_url)
    return GitHubSource(client=client, cache=BranchCache())


__all__ = [
    "BranchCache",
    "EmptyContentError",
    "FetchedContent",
    "FileSource",
    "GitHubClient",
    "GitHubSource",
    "GlobExpander",
    "InvalidRepositoryError",
    "NotAFileError",
    "RepositorySource",
    "SourceAuthError",
    "SourceError",
    "SourceNotFoundError",
    "SourceResolver",
    "TreeEntry",
    "create_source",
    "expand_braces",
    "is_pattern",
    "match_path",
    "parse_repository",
    "resolve_default_credential",
]
