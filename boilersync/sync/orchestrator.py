"""SyncOrchestrator — fetch, compare and write each task in order."""

from __future__ import annotations

import logging

from boilersync.config.models import SourceSpec
from boilersync.sources.base import SourceResolver
from boilersync.sources.glob import GlobExpander
from boilersync.sync.fs import LocalFileSystem
from boilersync.sync.models import SyncResult, SyncStatus, SyncSummary, SyncTask
from boilersync.sync.normalizer import expand_tasks, normalize

logger = logging.getLogger(__name__)

MISSING_LOCAL_REASON = "Local file does not exist and create-missing is disabled"


class SyncOrchestrator:
    """Runs sync tasks one at a time and aggregates their results.

    A task failure never escapes ``run``; it becomes a ``failed`` result
    carrying the error text. With ``fail_fast`` the run stops after the
    first failure and later tasks are left out of the summary.
    """

    def __init__(self, resolver: SourceResolver, fs: LocalFileSystem | None = None) -> None:
        self.resolver = resolver
        self.fs = fs or LocalFileSystem()

    async def sync_task(
        self,
        task: SyncTask,
        default_credential: str | None = None,
        create_missing: bool = True,
    ) -> SyncResult:
        """Sync a single remote file into its local path."""
        logger.info("Syncing: %s", task.local_path)
        credential = task.credential or default_credential

        try:
            exists = await self.fs.exists(task.local_path)
            if not exists and not create_missing:
                logger.info("  Skipped: file does not exist and create-missing is false")
                return SyncResult(task=task, status=SyncStatus.SKIPPED, error=MISSING_LOCAL_REASON)

            source = self.resolver.bind(task.repository, task.remote_path, task.ref)
            logger.info("  Fetching from %s", source.describe())
            fetched = await source.fetch(credential)

            existing = await self.fs.read_text(task.local_path) if exists else None
            if existing is not None and existing == fetched.content:
                logger.info("  Skipped: no changes")
                return SyncResult(
                    task=task, status=SyncStatus.SKIPPED, resolved_ref=fetched.resolved_ref
                )

            await self.fs.write_text(task.local_path, fetched.content)
        except Exception as e:
            logger.warning("  Failed: %s", e)
            logger.debug("failure detail for %s", task.local_path, exc_info=True)
            return SyncResult(task=task, status=SyncStatus.FAILED, error=str(e))

        is_new = existing is None
        logger.info("  %s: %s", "Created" if is_new else "Updated", task.local_path)
        return SyncResult(
            task=task,
            status=SyncStatus.CREATED if is_new else SyncStatus.UPDATED,
            resolved_ref=fetched.resolved_ref,
            is_new=is_new,
        )

    async def run(
        self,
        tasks: list[SyncTask],
        default_credential: str | None = None,
        create_missing: bool = True,
        fail_fast: bool = False,
    ) -> SyncSummary:
        """Sync every task in order and return the categorized summary."""
        results: list[SyncResult] = []
        for task in tasks:
            result = await self.sync_task(task, default_credential, create_missing)
            results.append(result)
            if fail_fast and result.status is SyncStatus.FAILED:
                logger.error("Stopping due to fail-on-error setting")
                break

        summary = SyncSummary.from_results(results)
        logger.info("Sync Summary:")
        logger.info("  Updated: %d", len(summary.updated))
        logger.info("  Created: %d", len(summary.created))
        logger.info("  Skipped: %d", len(summary.skipped))
        logger.info("  Failed: %d", len(summary.failed))
        logger.info("  Total: %d", summary.total)
        return summary


async def plan_sources(
    sources: list[SourceSpec],
    resolver: SourceResolver,
    default_credential: str | None = None,
) -> list[SyncTask]:
    """Normalize sources and expand their glob patterns into concrete tasks."""
    tasks = normalize(sources)
    return await expand_tasks(tasks, GlobExpander(resolver), default_credential)


async def sync_sources(
    sources: list[SourceSpec],
    resolver: SourceResolver,
    fs: LocalFileSystem | None = None,
    *,
    default_credential: str | None = None,
    create_missing: bool = True,
    fail_fast: bool = False,
) -> SyncSummary:
    """Normalize, expand and sync sources in one run."""
    tasks = await plan_sources(sources, resolver, default_credential)
    orchestrator = SyncOrchestrator(resolver, fs)
    return await orchestrator.run(
        tasks,
        default_credential=default_credential,
        create_missing=create_missing,
        fail_fast=fail_fast,
    )
