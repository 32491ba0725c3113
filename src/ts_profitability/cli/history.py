"""History command: one snapshot per month, walked through git history."""

from pathlib import Path
from typing import List, Optional

import typer

from ..api import capture_history
from ..core import CancellationToken
from ..exceptions import ProfitabilityError
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


@app.command("history")
def history(
    project_name: Optional[str] = typer.Argument(
        None, help="Name recorded in the output (default: project directory name)"
    ),
    start_year: int = typer.Option(..., "--start-year", "-y", min=1, help="First year of the series"),
    start_month: int = typer.Option(
        1, "--start-month", "-m", min=1, max=12, help="First month of the series (1-12)"
    ),
    branch: Optional[str] = typer.Option(
        None, "--branch", "-b", help="Branch to walk (default from config: dev)"
    ),
    path: Path = typer.Option(
        Path("."),
        "-C",
        "--path",
        help="Git working tree of the project",
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
    Build one snapshot per month from the start month to now.

    Checks out the newest commit before each month on the branch, measures
    it, and returns to the branch at the end. Ctrl-C stops after the current
    month and still writes the months collected so far.

    [bold cyan]Examples:[/bold cyan]

      ts-profitability history shop --start-year 2023 --start-month 6

      ts-profitability history shop -y 2022 -b main -o shop-history.json
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
            branch=branch,
            verbose=verbose,
            quiet=quiet,
        )
        token = CancellationToken()
        with cancel_on_interrupt(token):
            index = capture_history(
                path,
                project_name=project_name,
                start_year=start_year,
                start_month=start_month,
                config_file=config,
                reporter=make_reporter(settings),
                cancellation=token,
                **config_overrides(settings),
            )

        if token.is_cancelled:
            console.print(
                f"[yellow]History cancelled[/yellow]; writing {len(index.snap_shots or [])} collected months"
            )
        emit_index(index, output)
        print_summary(index, settings)

    except ProfitabilityError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
