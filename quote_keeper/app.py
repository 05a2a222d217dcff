"""Typer CLI entrypoint for quote-keeper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigLocator, ConfigRepository, KeeperSettings
from .errors import ConfigError, MirrorWriteError, StorageWriteError
from .infra import ReadStatus
from .logging_conf import configure_logging
from .orchestrator import DedupSummary, FetchSummary, Orchestrator

EXIT_STORAGE_FAILURE = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    help="Maintain a deduplicated, append-only quote collection.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    locator: ConfigLocator
    repository: ConfigRepository
    verbose: bool = False


def build_state(verbose: bool) -> AppState:
    locator = ConfigLocator()
    repository = ConfigRepository(locator)
    configure_logging(verbose=verbose, log_dir=locator.logs_dir)
    return AppState(locator=locator, repository=repository, verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _load_settings(state: AppState, overrides: dict[str, Any]) -> KeeperSettings:
    try:
        return state.repository.load_settings(overrides)
    except ConfigError as exc:
        console.print(f"Invalid configuration: {exc}", style="red", markup=False)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc


def _report_read_status(status: ReadStatus) -> None:
    if status is ReadStatus.MISSING:
        console.print("No collection file yet; starting from an empty collection.", style="dim")
    elif status is not ReadStatus.LOADED:
        console.print(f"Collection file is {status.value}; treating it as empty.", style="yellow")


def _storage_failure(exc: StorageWriteError) -> typer.Exit:
    if isinstance(exc, MirrorWriteError):
        console.print(f"Primary collection written, but mirroring failed: {exc}", style="red", markup=False)
    else:
        console.print(f"Failed to write collection: {exc}", style="red", markup=False)
    return typer.Exit(code=EXIT_STORAGE_FAILURE)


def _render_fetch_summary(summary: FetchSummary) -> Table:
    table = Table(title="Fetch result", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Requested", str(summary.requested))
    table.add_row("Before", str(summary.before))
    table.add_row("Appended", str(summary.appended))
    table.add_row("Total", str(summary.total))
    if summary.exhausted_slots:
        table.add_row("Slots exhausted", str(len(summary.exhausted_slots)))
    if summary.empty_slots:
        table.add_row("Slots without candidates", str(len(summary.empty_slots)))
    return table


def _render_dedup_summary(summary: DedupSummary) -> Table:
    table = Table(title="Deduplication result", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Before", str(summary.before))
    table.add_row("After", str(summary.after))
    table.add_row("Removed", str(summary.duplicates))
    return table


@app.callback()
def main(
    ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True)
) -> None:
    ctx.obj = build_state(verbose)


@app.command("fetch", help="Fetch new quotes and append those not already collected.")
def fetch(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(None, "--count", "-n", min=1, help="Quotes to add (MAX_QUOTES_PER_RUN)."),
    offline: Optional[bool] = typer.Option(None, "--offline/--online", help="Skip the remote API (OFFLINE_MODE)."),
    dry_run: Optional[bool] = typer.Option(None, "--dry-run/--no-dry-run", help="Report without writing (DRY_RUN)."),
) -> None:
    state = _get_state(ctx)
    settings = _load_settings(
        state, {"max_quotes_per_run": count, "offline_mode": offline, "dry_run": dry_run}
    )
    orchestrator = Orchestrator(settings, state.locator)
    try:
        summary = orchestrator.run_fetch()
    except StorageWriteError as exc:
        raise _storage_failure(exc) from exc

    _report_read_status(summary.read_status)
    console.print(_render_fetch_summary(summary))
    if summary.appended == 0:
        console.print("No new items appended.", style="yellow")
    elif summary.dry_run:
        console.print(
            f"[DRY_RUN] Would write {summary.appended} item(s). Total would be {summary.total}.",
            style="yellow",
            markup=False,
        )
    else:
        console.print(f"Appended {summary.appended} new item(s). Total={summary.total}", style="green")


@app.command("dedup", help="Remove duplicate quotes by normalized content hash.")
def dedup(
    ctx: typer.Context,
    dry_run: Optional[bool] = typer.Option(None, "--dry-run/--no-dry-run", help="Report without writing (DRY_RUN)."),
) -> None:
    state = _get_state(ctx)
    settings = _load_settings(state, {"dry_run": dry_run})
    orchestrator = Orchestrator(settings, state.locator)
    try:
        summary = orchestrator.run_dedup()
    except StorageWriteError as exc:
        raise _storage_failure(exc) from exc

    _report_read_status(summary.read_status)
    console.print(_render_dedup_summary(summary))
    if summary.duplicates == 0:
        console.print("No duplicates found. Data is already clean!", style="green")
    elif summary.dry_run:
        console.print(f"[DRY_RUN] Would remove {summary.duplicates} duplicate(s).", style="yellow", markup=False)
    else:
        console.print("Deduplicated data written successfully!", style="green")


__all__ = ["app", "build_state"]
