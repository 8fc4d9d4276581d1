"""Markdown and JSON reports for a SyncSummary."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from boilersync.config.models import OutputConfig
from boilersync.sync.models import SyncSummary

logger = logging.getLogger(__name__)


def generate_step_summary(summary: SyncSummary) -> str:
    """Render the summary as a Markdown table with a one-line verdict."""
    lines = [
        "# Boilerplate Sync Results",
        "",
        "| Status | Count |",
        "|--------|-------|",
        f"| ✅ Updated | {len(summary.updated)} |",
        f"| 🆕 Created | {len(summary.created)} |",
        f"| ⏭️ Skipped | {len(summary.skipped)} |",
        f"| ❌ Failed | {len(summary.failed)} |",
        f"| **Total** | **{summary.total}** |",
        "",
    ]

    if summary.has_changes:
        lines.append("✅ Changes detected")
    elif summary.all_failed:
        lines.append("⚠️ All files failed")
    else:
        lines.append("ℹ️ No changes detected")

    if summary.failed:
        lines += ["", "## Failures", ""]
        for result in summary.failed:
            lines.append(f"- `{result.task.local_path}`: {result.error}")

    return "\n".join(lines)


def summary_to_dict(summary: SyncSummary) -> dict:
    """Machine-readable counts plus the per-file results."""
    return {
        "has_changes": summary.has_changes,
        "all_failed": summary.all_failed,
        "updated_count": len(summary.updated) + len(summary.created),
        "failed_count": len(summary.failed),
        "skipped_count": len(summary.skipped),
        "total": summary.total,
        "summary": summary.model_dump(mode="json"),
    }


def write_reports(summary: SyncSummary, config: OutputConfig) -> list[Path]:
    """Write whichever reports the config asks for. Returns the written paths."""
    written: list[Path] = []
    if config.summary_path:
        dest = Path(config.summary_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(generate_step_summary(summary) + "\n", encoding="utf-8")
        written.append(dest)
    if config.json_path:
        dest = Path(config.json_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(json.dumps(summary_to_dict(summary), indent=2), encoding="utf-8")
        written.append(dest)
    for dest in written:
        logger.info("wrote report %s", dest)
    return written
