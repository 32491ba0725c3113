"""Public API for ts-profitability.

Two entry points, each returning an ``Index`` ready for ``write_index``:

Example:
    >>> from ts_profitability import capture_current_state, capture_history
    >>>
    >>> index = capture_current_state("/path/to/project", project_name="shop")
    >>> index.current_state.application_stats.stats["class"]
    42
    >>>
    >>> index = capture_history(
    ...     "/path/to/project",
    ...     project_name="shop",
    ...     start_year=2023,
    ...     start_month=6,
    ...     branch="main",
    ... )
    >>> [s.snapshot_date for s in index.snap_shots][:2]
    ['2023-6-1', '2023-7-1']
"""

from __future__ import annotations

import time
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Union

from .config import ProfilerConfig, load_config
from .core import CancellationToken, ProgressReporter, SilentReporter
from .exceptions import InvalidPathError
from .logging_config import get_logger
from .models import Index, Snapshot
from .scanning import (
    GlobFileSetResolver,
    TreeSitterHalsteadAnalyzer,
    TreeSitterParser,
    TreeSitterSymbolSource,
)
from .snapshot import (
    HistoricalWalker,
    SnapshotBuilder,
    SnapshotOptions,
    WalkOptions,
    format_snapshot_date,
)
from .temporal import FileLineCounter, GitVersionControl

logger = get_logger(__name__)

Reporter = Union[ProgressReporter, SilentReporter]


def _resolve_root(path: Union[str, Path]) -> Path:
    root = Path(path).resolve()
    if not root.exists():
        raise InvalidPathError(root, "Path does not exist")
    if not root.is_dir():
        raise InvalidPathError(root, "Path is not a directory")
    return root


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def create_builder(root: Path, config: ProfilerConfig) -> SnapshotBuilder:
    """SnapshotBuilder wired with the tree-sitter, glob and git collaborators."""
    parser = TreeSitterParser()
    return SnapshotBuilder(
        root,
        symbol_source=TreeSitterSymbolSource(root, parser),
        halstead_analyzer=TreeSitterHalsteadAnalyzer(root, parser),
        file_resolver=GlobFileSetResolver(root),
        line_counter=FileLineCounter(),
        vcs=GitVersionControl(timeout=config.git_timeout_seconds),
        max_workers=config.workers,
    )


def capture_current_state(
    path: Union[str, Path] = ".",
    project_name: Optional[str] = None,
    config_file: Optional[Path] = None,
    reporter: Optional[Reporter] = None,
    cancellation: Optional[CancellationToken] = None,
    **overrides,
) -> Index:
    """Measure the working tree as it is now.

    Args:
        path: Project root (default: current directory)
        project_name: Name recorded in the index (default: root directory name)
        config_file: Optional explicit config file path
        reporter: Progress reporter (default: silent)
        cancellation: Token a caller can set to stop the build
        **overrides: Configuration overrides (e.g. app_include=["src/**/*.ts"])

    Returns:
        Index with ``current_state`` set

    Raises:
        InvalidPathError: If the root does not exist or is not a directory
        ProfitabilityError: If configuration is invalid
        OperationCancelledError: If cancelled before the snapshot completed
    """
    root = _resolve_root(path)
    config = load_config(config_file=config_file, **overrides)
    reporter = reporter or SilentReporter()
    builder = create_builder(root, config)

    options = SnapshotOptions(
        snapshot_date=format_snapshot_date(date.today()),
        app_include=config.app_include,
        app_exclude=config.app_exclude,
        test_include=config.test_include,
        parse_coverage_stats=config.parse_coverage_stats,
        list_parsed_files=config.list_parsed_files,
        cancellation=cancellation,
        file_limit=config.file_limit,
    )
    logger.info(f"Capturing current state of {root}")
    snapshot = reporter.with_progress("Measuring files", lambda task: builder.build(options, task))

    return Index(
        project_name=project_name or root.name,
        timestamp=_timestamp_ms(),
        current_state=snapshot,
    )


def capture_history(
    path: Union[str, Path] = ".",
    project_name: Optional[str] = None,
    start_year: Optional[int] = None,
    start_month: Optional[int] = None,
    config_file: Optional[Path] = None,
    reporter: Optional[Reporter] = None,
    cancellation: Optional[CancellationToken] = None,
    clock: Callable[[], date] = date.today,
    **overrides,
) -> Index:
    """Measure one snapshot per month from the start month to now.

    The working tree is moved through the history of ``branch`` and put back
    on ``branch`` afterwards. Cancelling keeps the months already measured.

    Args:
        path: Project root; must be a git working tree
        project_name: Name recorded in the index (default: root directory name)
        start_year: First year of the series (default: current year)
        start_month: First month of the series, 1..12 (default: January)
        config_file: Optional explicit config file path
        reporter: Progress reporter (default: silent)
        cancellation: Token a caller can set to stop the walk
        clock: Source of "today" for the end of the range
        **overrides: Configuration overrides (e.g. branch="main")

    Returns:
        Index with ``snap_shots`` ordered oldest first

    Raises:
        InvalidPathError: If the root does not exist or is not a directory
        InvalidConfigError: If the start month is invalid or in the future
    """
    root = _resolve_root(path)
    config = load_config(config_file=config_file, **overrides)
    reporter = reporter or SilentReporter()
    builder = create_builder(root, config)
    vcs = GitVersionControl(timeout=config.git_timeout_seconds)
    if not vcs.is_repository(root):
        logger.warning(f"{root} is not a git repository; every month will measure the working tree")

    today = clock()
    options = WalkOptions(
        start_year=start_year if start_year is not None else today.year,
        start_month=start_month if start_month is not None else 1,
        branch=config.branch,
        app_include=config.app_include,
        app_exclude=config.app_exclude,
        test_include=config.test_include,
        parse_coverage_stats=config.parse_coverage_stats,
        list_parsed_files=config.list_parsed_files,
        cancellation=cancellation,
        file_limit=config.file_limit,
    )
    walker = HistoricalWalker(root, builder, vcs, clock=clock)
    logger.info(f"Capturing history of {root} on {config.branch} from {options.start_year}-{options.start_month}")
    snapshots: list[Snapshot] = reporter.with_progress("Walking history", lambda task: walker.walk(options, task))

    return Index(
        project_name=project_name or root.name,
        timestamp=_timestamp_ms(),
        snap_shots=snapshots,
    )


__all__ = [
    "capture_current_state",
    "capture_history",
    "create_builder",
]
