"""Shared CLI helpers: console, option resolution, output, Ctrl-C handling."""

import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import ProfilerConfig, load_config
from ..core import CancellationToken, ProgressReporter, SilentReporter
from ..models import Index, Snapshot
from ..storage import index_to_json, write_index

# stderr, so JSON on stdout stays machine-readable
console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    include: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
    tests: Optional[List[str]] = None,
    coverage: Optional[bool] = None,
    list_files: Optional[bool] = None,
    limit: Optional[int] = None,
    workers: Optional[int] = None,
    branch: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> ProfilerConfig:
    """Build the configuration from CLI options; unset options keep file/env values."""
    overrides = {
        "app_include": include or None,
        "app_exclude": exclude or None,
        "test_include": tests or None,
        "parse_coverage_stats": coverage,
        "list_parsed_files": list_files,
        "file_limit": limit,
        "workers": workers,
        "branch": branch,
        "verbose": verbose,
        "quiet": quiet,
    }
    return load_config(config_file=config, **overrides)


def config_overrides(config: ProfilerConfig) -> dict:
    """Resolved config as keyword overrides for the api functions."""
    return {
        "app_include": config.app_include,
        "app_exclude": config.app_exclude,
        "test_include": config.test_include,
        "parse_coverage_stats": config.parse_coverage_stats,
        "list_parsed_files": config.list_parsed_files,
        "file_limit": config.file_limit,
        "workers": config.workers,
        "branch": config.branch,
        "git_timeout_seconds": config.git_timeout_seconds,
        "verbosity": config.verbosity,
    }


def make_reporter(config: ProfilerConfig):
    if config.verbosity == "quiet":
        return SilentReporter()
    return ProgressReporter(console)


@contextmanager
def cancel_on_interrupt(token: CancellationToken) -> Iterator[CancellationToken]:
    """First Ctrl-C cancels cooperatively; a second one interrupts immediately."""

    def _handler(signum, frame):
        if token.is_cancelled:
            raise KeyboardInterrupt
        console.print("\n[yellow]Cancelling... (press Ctrl-C again to abort)[/yellow]")
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


def emit_index(index: Index, output: Optional[Path]) -> None:
    """Write the index to ``output``, or as JSON to stdout."""
    if output is None:
        typer.echo(index_to_json(index))
        return
    target = write_index(index, output)
    console.print(f"[green]Wrote[/green] {target}")


def _snapshot_row(snapshot: Snapshot) -> list[str]:
    app_stats = snapshot.application_stats
    coverage = snapshot.coverage_stats
    return [
        snapshot.snapshot_date,
        snapshot.snapshot_hash[:8] if snapshot.snapshot_hash else "-",
        str(app_stats.documents_parsed_amount),
        str(app_stats.loc_excluding_tests),
        str(app_stats.stats.get("class", 0)),
        str(app_stats.stats.get("function", 0) + app_stats.stats.get("method", 0)),
        str(app_stats.metrics.halstead.bugs_delivered),
        str(app_stats.metrics.gaffney.bugs_excluding_tests),
        str(coverage.test_case_occurrences) if coverage is not None else "-",
    ]


def summary_table(index: Index) -> Table:
    """One row per snapshot in the index."""
    snapshots = index.snap_shots if index.snap_shots is not None else []
    if index.current_state is not None:
        snapshots = [index.current_state]

    table = Table(title=f"{index.project_name}", show_lines=False, pad_edge=True)
    table.add_column("Date", style="bold")
    table.add_column("Commit", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("LOC", justify="right")
    table.add_column("Classes", justify="right")
    table.add_column("Functions", justify="right")
    table.add_column("Halstead bugs", justify="right", style="yellow")
    table.add_column("Gaffney bugs", justify="right", style="yellow")
    table.add_column("Test cases", justify="right", style="green")
    for snapshot in snapshots:
        table.add_row(*_snapshot_row(snapshot))
    return table


def print_summary(index: Index, config: ProfilerConfig) -> None:
    if config.verbosity == "quiet":
        return
    console.print()
    console.print(summary_table(index))
    console.print()
