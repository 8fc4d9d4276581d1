"""Pydantic models for sync tasks and their outcomes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SyncStatus(str, Enum):
    UPDATED = "updated"
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncTask(BaseModel):
    """One concrete file to pull from a remote repository."""

    model_config = ConfigDict(frozen=True)

    local_path: str
    remote_path: str
    repository: str = Field(description="Source repository (owner/repo)")
    ref: str | None = None
    credential: str | None = Field(default=None, repr=False, exclude=True)
    is_identity: bool = Field(
        default=False, description="Local and remote paths are the same entry; may be a glob"
    )


class SyncResult(BaseModel):
    """Outcome of syncing a single task."""

    model_config = ConfigDict(frozen=True)

    task: SyncTask
    status: SyncStatus
    error: str | None = None
    resolved_ref: str | None = None
    is_new: bool | None = None


class SyncSummary(BaseModel):
    """Results of a whole run, partitioned by status."""

    model_config = ConfigDict(frozen=True)

    updated: list[SyncResult] = Field(default_factory=list)
    created: list[SyncResult] = Field(default_factory=list)
    skipped: list[SyncResult] = Field(default_factory=list)
    failed: list[SyncResult] = Field(default_factory=list)
    total: int = 0
    has_changes: bool = False
    all_failed: bool = False

    @classmethod
    def from_results(cls, results: list[SyncResult]) -> SyncSummary:
        by_status: dict[SyncStatus, list[SyncResult]] = {s: [] for s in SyncStatus}
        for result in results:
            by_status[result.status].append(result)

        changed = len(by_status[SyncStatus.UPDATED]) + len(by_status[SyncStatus.CREATED])
        failed = by_status[SyncStatus.FAILED]
        return cls(
            updated=by_status[SyncStatus.UPDATED],
            created=by_status[SyncStatus.CREATED],
            skipped=by_status[SyncStatus.SKIPPED],
            failed=failed,
            total=len(results),
            has_changes=changed > 0,
            all_failed=len(failed) == len(results) and len(results) > 0,
        )
