"""Snapshot command: measure the working tree as it is now."""

from pathlib import Path
from typing import List, Optional

import typer

from ..api import capture_current_state
from ..core import CancellationToken
from ..exceptions import OperationCancelledError, ProfitabilityError
from ..logging_config import setup_logging
from . import app
from ._common import (
    cancel_on_interrupt,
    config_overrides,
    console,
    emit_index,
    make_reporter,
    print_summary,
    resolve_config,
)


@app.command("snapshot")
def snapshot(
    project_name: Optional[str] = typer.Argument(
        None, help="Name recorded in the output (default: project directory name)"
    ),
    path: Path = typer.Option(
        Path("."),
        "-C",
        "--path",
        help="Project root to measure",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the JSON index here instead of stdout"
    ),
    include: Optional[List[str]] = typer.Option(
        None, "--include", "-i", help="Application file glob (repeatable)"
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-e", help="Glob removed from the application files (repeatable)"
    ),
    tests: Optional[List[str]] = typer.Option(
        None, "--tests", "-t", help="Test file glob (repeatable)"
    ),
    coverage: Optional[bool] = typer.Option(
        None, "--coverage/--no-coverage", help="Collect coverage stats from test files"
    ),
    list_files: Optional[bool] = typer.Option(
        None, "--list-files/--no-list-files", help="Record parsed file paths in the output"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Maximum files per pattern set"),
    workers: Optional[int] = typer.Option(
        None, "-w", "--workers", min=1, max=64, help="Parallel workers (default: auto-detect)"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print errors"),
):
    """
    Measure the current working tree and print a JSON index.

    [bold cyan]Examples:[/bold cyan]

      ts-profitability snapshot shop

      ts-profitability snapshot shop -C ../shop --no-coverage -o shop.json

      ts-profitability snapshot --include "src/**/*.ts" --tests "src/**/*.spec.ts"
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config,
            include=include,
            exclude=exclude,
            tests=tests,
            coverage=coverage,
            list_files=list_files,
            limit=limit,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
        token = CancellationToken()
        with cancel_on_interrupt(token):
            index = capture_current_state(
                path,
                project_name=project_name,
                config_file=config,
                reporter=make_reporter(settings),
                cancellation=token,
                **config_overrides(settings),
            )

        emit_index(index, output)
        print_summary(index, settings)

    except OperationCancelledError:
        console.print("[yellow]Snapshot cancelled[/yellow]; nothing written")
        raise typer.Exit(130)

    except ProfitabilityError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
