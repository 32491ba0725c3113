"""HistoricalWalker: one snapshot per calendar month, oldest first.

For each month from the start month up to the current month (both inclusive)
the walker moves the working tree to the newest commit made before the first
day of that month, builds a snapshot there and appends it to the series. The
requested branch is checked out before the first month and again when the
walk ends, however it ends.

Months are strictly sequential: the next checkout never starts while a build
is still reading the working tree.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..core import CancellationToken, ProgressTask
from ..exceptions import InvalidConfigError, OperationCancelledError, ProfitabilityError
from ..logging_config import get_logger
from ..models import Snapshot
from ..protocols import Patterns, VersionControl
from .builder import SnapshotBuilder, SnapshotOptions, format_snapshot_date

logger = get_logger(__name__)


def add_month(day: date) -> date:
    """Same day-of-month one month later.

    Days past the end of the target month spill into the month after it, so
    Jan 31 steps to Mar 3 in a common year.
    """
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    last_day = calendar.monthrange(year, month)[1]
    if day.day <= last_day:
        return date(year, month, day.day)
    return date(year, month, last_day) + timedelta(days=day.day - last_day)


def iter_months(start: date, end: date) -> Iterator[date]:
    """Yield ``start`` and every month step after it while not past ``end``."""
    current = start
    while current <= end:
        yield current
        current = add_month(current)


@dataclass
class WalkOptions:
    """Range and per-snapshot options for a historical walk."""

    start_year: int
    start_month: int
    branch: str = "dev"
    app_include: Patterns = field(default_factory=lambda: ["**/*.ts"])
    app_exclude: Optional[Patterns] = None
    test_include: Optional[Patterns] = None
    parse_coverage_stats: bool = False
    list_parsed_files: bool = False
    cancellation: Optional[CancellationToken] = None
    file_limit: Optional[int] = None

    def snapshot_options(self, snapshot_date: str) -> SnapshotOptions:
        return SnapshotOptions(
            snapshot_date=snapshot_date,
            app_include=self.app_include,
            app_exclude=self.app_exclude,
            test_include=self.test_include,
            parse_coverage_stats=self.parse_coverage_stats,
            list_parsed_files=self.list_parsed_files,
            cancellation=self.cancellation,
            file_limit=self.file_limit,
        )


class HistoricalWalker:
    """Drives a SnapshotBuilder across git history, month by month."""

    def __init__(
        self,
        root: Path,
        builder: SnapshotBuilder,
        vcs: VersionControl,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.root = Path(root)
        self.builder = builder
        self.vcs = vcs
        self.clock = clock

    def walk(self, options: WalkOptions, progress: Optional[ProgressTask] = None) -> list[Snapshot]:
        """Build the monthly series.

        Cancellation stops the walk and returns the snapshots collected so far;
        the month in flight is dropped. Any other failure of a single month is
        logged and that month is skipped.

        Raises:
            InvalidConfigError: start month is not 1..12 or lies in the future
        """
        start, end = self._date_range(options)
        token = options.cancellation or CancellationToken()
        progress = progress or ProgressTask()
        months = list(iter_months(start, end))
        progress.set_total(len(months))

        snapshots: list[Snapshot] = []
        self._checkout_branch(options.branch)
        try:
            for probe in months:
                if token.is_cancelled:
                    logger.info(f"Walk cancelled after {len(snapshots)} of {len(months)} months")
                    break

                snapshot_date = format_snapshot_date(probe)
                progress.describe(f"Snapshot {snapshot_date}")
                self._move_to_month(options.branch, probe)

                try:
                    snapshot = self.builder.build(options.snapshot_options(snapshot_date))
                except OperationCancelledError:
                    logger.info(f"Walk cancelled while building {snapshot_date}")
                    break
                except ProfitabilityError as e:
                    logger.warning(f"Skipping {snapshot_date}: {e}")
                    progress.advance()
                    continue

                snapshots.append(snapshot)
                progress.advance()
        finally:
            self._checkout_branch(options.branch)

        return snapshots

    def _date_range(self, options: WalkOptions) -> tuple[date, date]:
        if not 1 <= options.start_month <= 12:
            raise InvalidConfigError(
                "start_month", options.start_month, "must be between 1 and 12"
            )
        today = self.clock()
        end = date(today.year, today.month, 1)
        try:
            start = date(options.start_year, options.start_month, 1)
        except ValueError as e:
            raise InvalidConfigError("start_year", options.start_year, str(e))
        if start > end:
            raise InvalidConfigError(
                "start_year/start_month",
                f"{options.start_year}-{options.start_month}",
                f"lies after the current month {end.year}-{end.month}",
            )
        return start, end

    def _move_to_month(self, branch: str, probe: date) -> None:
        commit = self.vcs.nearest_commit_before(self.root, branch, probe.year, probe.month)
        if not commit:
            logger.warning(
                f"No commit on {branch} before {probe.year}-{probe.month}-1; measuring working tree as-is"
            )
            return
        if not self.vcs.checkout(self.root, commit):
            logger.warning(f"Could not check out {commit}; measuring working tree as-is")

    def _checkout_branch(self, branch: str) -> None:
        if not self.vcs.checkout(self.root, branch):
            logger.warning(f"Could not check out branch {branch}")
