"""Flatten source configuration into sync tasks."""

from __future__ import annotations

import logging

from boilersync.config.models import SourceSpec
from boilersync.sources.glob import GlobExpander, is_pattern
from boilersync.sources.models import SourceError
from boilersync.sync.models import SyncTask

logger = logging.getLogger(__name__)


def normalize(sources: list[SourceSpec]) -> list[SyncTask]:
    """Flatten sources into one task per listed file.

    Output order is sources as listed, and within each source its identity
    files before its path pairs, each in listed order. Fetches, logs and
    summary entries all follow this order.
    """
    tasks: list[SyncTask] = []
    for source in sources:
        for path in source.identity_files:
            tasks.append(
                SyncTask(
                    local_path=path,
                    remote_path=path,
                    repository=source.repository,
                    ref=source.ref,
                    credential=source.credential,
                    is_identity=True,
                )
            )
        for pair in source.path_pairs:
            tasks.append(
                SyncTask(
                    local_path=pair.local_path,
                    remote_path=pair.resolved_remote_path,
                    repository=source.repository,
                    ref=source.ref,
                    credential=source.credential,
                )
            )
    return tasks


async def expand_tasks(
    tasks: list[SyncTask],
    expander: GlobExpander,
    default_credential: str | None = None,
) -> list[SyncTask]:
    """Replace identity tasks whose path is a glob with one task per match.

    Path pairs are never expanded. A pattern that matches nothing is kept
    as-is so it fails later through the ordinary not-found path.
    """
    expanded: list[SyncTask] = []
    for task in tasks:
        if not task.is_identity or not is_pattern(task.remote_path):
            expanded.append(task)
            continue

        try:
            matches = await expander.expand(
                task.repository,
                task.remote_path,
                task.ref,
                task.credential or default_credential,
            )
        except SourceError as e:
            # The task's own fetch will fail with the same cause
            logger.warning("Could not expand %s in %s: %s", task.remote_path, task.repository, e)
            expanded.append(task)
            continue

        if not matches:
            logger.warning(
                "Pattern %s matched no files in %s", task.remote_path, task.repository
            )
            expanded.append(task)
            continue

        logger.info(
            "Pattern %s matched %d file(s) in %s", task.remote_path, len(matches), task.repository
        )
        for path in matches:
            expanded.append(task.model_copy(update={"local_path": path, "remote_path": path}))
    return expanded
