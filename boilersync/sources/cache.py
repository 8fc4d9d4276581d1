"""Per-repository default branch cache."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class BranchCache:
    """Maps 'owner/repo' to its resolved default branch.

    Entries are only ever added; nothing expires them. A branch renamed on
    the remote while the cache is alive keeps resolving to the old name
    until ``clear()`` is called. Create one cache per run.
    """

    def __init__(self) -> None:
        self._branches: dict[str, str] = {}

    def get(self, repository: str) -> str | None:
        return self._branches.get(repository)

    def set(self, repository: str, branch: str) -> None:
        self._branches[repository] = branch
        logger.debug("cached default branch %s for %s", branch, repository)

    def clear(self) -> None:
        self._branches.clear()

    def __contains__(self, repository: object) -> bool:
        return repository in self._branches

    def __len__(self) -> int:
        return len(self._branches)
