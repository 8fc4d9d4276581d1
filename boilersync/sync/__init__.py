"""Sync engine: normalize sources, expand globs, fetch and write files."""

from boilersync.sync.fs import LocalFileSystem
from boilersync.sync.models import SyncResult, SyncStatus, SyncSummary, SyncTask
from boilersync.sync.normalizer import expand_tasks, normalize
from boilersync.sync.orchestrator import SyncOrchestrator, plan_sources, sync_sources

__all__ = [
    "LocalFileSystem",
    "SyncOrchestrator",
    "SyncResult",
    "SyncStatus",
    "SyncSummary",
    "SyncTask",
    "expand_tasks",
    "normalize",
    "plan_sources",
    "sync_sources",
]
