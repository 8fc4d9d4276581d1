"""CLI entry point for boilersync."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from boilersync.config import BoilersyncConfig, ConfigError, load_config, parse_sources
from boilersync.config.loader import DEFAULT_CONFIG_TEMPLATE
from boilersync.log import setup_logging
from boilersync.output import write_reports
from boilersync.sources import create_source, resolve_default_credential
from boilersync.sync import LocalFileSystem, SyncSummary, SyncTask, normalize, plan_sources, sync_sources

app = typer.Typer(
    name="boilersync",
    help="Pull boilerplate files from remote GitHub repositories into this one.",
)

config_app = typer.Typer(help="Manage boilersync configuration.")
app.add_typer(config_app, name="config")

# Global state
_config_path: str | None = None


def _get_config() -> BoilersyncConfig:
    try:
        return load_config(_config_path)
    except ConfigError as e:
        rprint(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to boilersync.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config_path
    _config_path = config


def _display_tasks(tasks: list[SyncTask], title: str) -> None:
    table = Table(title=f"{title} ({len(tasks)})")
    table.add_column("Local path", style="cyan")
    table.add_column("Source", style="green")
    table.add_column("Remote path")
    table.add_column("Ref", style="yellow")
    for t in tasks:
        table.add_row(t.local_path, t.repository, t.remote_path, t.ref or "(default)")
    rprint(table)


def _display_summary(summary: SyncSummary) -> None:
    table = Table(title="Sync Summary")
    table.add_column("Status")
    table.add_column("Count", justify="right")
    table.add_row("[green]Updated[/green]", str(len(summary.updated)))
    table.add_row("[cyan]Created[/cyan]", str(len(summary.created)))
    table.add_row("[dim]Skipped[/dim]", str(len(summary.skipped)))
    table.add_row("[red]Failed[/red]", str(len(summary.failed)))
    table.add_row("[bold]Total[/bold]", str(summary.total))
    rprint(table)

    for result in summary.failed:
        rprint(f"  [red]✗[/red] {escape(result.task.local_path)}: {escape(result.error or '')}")


@app.command()
def sync(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="List the files that would be synced without fetching them"
    ),
    create_missing: bool | None = typer.Option(
        None, "--create-missing/--no-create-missing", help="Create local files that do not exist"
    ),
    fail_on_error: bool | None = typer.Option(
        None, "--fail-on-error/--no-fail-on-error", help="Stop at the first failure and exit 1"
    ),
    workspace: Annotated[
        str | None, typer.Option("--workspace", "-w", help="Override the workspace root")
    ] = None,
    sources: Annotated[
        str | None,
        typer.Option("--sources", help="Inline YAML list of sources, replacing the configured ones"),
    ] = None,
) -> None:
    """Sync configured files from their source repositories."""
    cfg = _get_config()
    setup_logging(cfg.log_level, cfg.log_format)

    if sources is not None:
        try:
            cfg = cfg.model_copy(update={"sources": parse_sources(sources)})
        except ConfigError as e:
            rprint(f"[red]Configuration error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    if not cfg.sources:
        rprint("[red]Configuration error:[/red] no sources configured")
        raise typer.Exit(1)

    do_create = cfg.create_missing if create_missing is None else create_missing
    do_fail = cfg.fail_on_error if fail_on_error is None else fail_on_error
    root = workspace or cfg.workspace

    source = create_source(cfg)
    credential = resolve_default_credential(cfg)
    total_files = sum(len(s.identity_files) + len(s.path_pairs) for s in cfg.sources)
    rprint(
        f"[bold]Syncing[/bold] {total_files} file entr{'y' if total_files == 1 else 'ies'} "
        f"from {len(cfg.sources)} source(s) into {root}"
    )

    if dry_run:
        tasks = asyncio.run(plan_sources(cfg.sources, source, credential))
        rprint("[yellow](dry run — no file content fetched or written)[/yellow]\n")
        _display_tasks(tasks, "Files to sync")
        return

    summary = asyncio.run(
        sync_sources(
            cfg.sources,
            source,
            LocalFileSystem(root),
            default_credential=credential,
            create_missing=do_create,
            fail_fast=do_fail,
        )
    )
    _display_summary(summary)

    for dest in write_reports(summary, cfg.output):
        rprint(f"[green]Report:[/green] {dest}")

    if summary.has_changes:
        rprint("[green]Changes detected.[/green]")
    elif summary.all_failed:
        rprint("[yellow]All files failed.[/yellow]")
    else:
        rprint("No changes detected.")

    if do_fail and summary.failed:
        rprint(f"[red]{len(summary.failed)} file(s) failed to sync[/red]")
        raise typer.Exit(1)


# ── config subcommands ───────────────────────────────────────────────


@config_app.command("init")
def config_init(
    path: str = typer.Argument("boilersync.yaml", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a starter boilersync.yaml."""
    dest = Path(path)
    if dest.exists() and not force:
        rprint(f"[red]Error:[/red] {dest} already exists (use --force to overwrite)")
        raise typer.Exit(1)
    dest.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {dest}")


@config_app.command("show")
def config_show() -> None:
    """Show the configured sources and the files they map, before glob expansion."""
    cfg = _get_config()
    rprint(
        Panel(
            f"[dim]Workspace:[/dim]       {cfg.workspace}\n"
            f"[dim]Create missing:[/dim]  {cfg.create_missing}\n"
            f"[dim]Fail on error:[/dim]   {cfg.fail_on_error}\n"
            f"[dim]Token env:[/dim]       {cfg.source_token_env} → {cfg.token_env}",
            title="Configuration",
            border_style="blue",
        )
    )
    if not cfg.sources:
        rprint("[yellow]No sources configured.[/yellow]")
        return
    _display_tasks(normalize(cfg.sources), "Configured files")
