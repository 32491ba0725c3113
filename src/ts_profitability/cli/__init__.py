"""CLI entry point: registers the snapshot and history subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="ts-profitability",
    help="ts-profitability - Structural complexity and test posture of TypeScript projects",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]ts-profitability[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Measure symbol counts, lines of code, Halstead metrics and a Gaffney bug
    estimate for a TypeScript project, now or month by month through git history.
    """


# Import subcommands to register them
from .snapshot import snapshot as _snapshot  # noqa: F401, E402
from .history import history as _history  # noqa: F401, E402


def main() -> None:
    app()
