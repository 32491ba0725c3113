"""SnapshotBuilder: one Snapshot of the working tree as it is right now.

Usage:
    builder = SnapshotBuilder(
        root,
        symbol_source=TreeSitterSymbolSource(root),
        halstead_analyzer=TreeSitterHalsteadAnalyzer(root),
        file_resolver=GlobFileSetResolver(root),
        line_counter=FileLineCounter(),
        vcs=GitVersionControl(),
    )
    snapshot = builder.build(SnapshotOptions(snapshot_date="2024-3-1"))

Every matched file is one unit of work on a thread pool. Units only ever add
to a shared ``_SnapshotAccumulator`` under its lock, so completion order does
not affect the totals. A unit that fails is logged and contributes nothing;
a unit that observes cancellation raises ``OperationCancelledError``, which
stops the build and propagates to the caller.
"""

from __future__ import annotations

import os
import re
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from threading import Lock
from typing import Callable, Optional

from ..analysis import HalsteadAccumulator, aggregate, compute_gaffney
from ..core import CancellationToken, ProgressTask
from ..exceptions import OperationCancelledError
from ..logging_config import get_logger
from ..models import (
    ApplicationStats,
    CoverageStats,
    Metrics,
    Snapshot,
    SymbolKind,
)
from ..protocols import (
    FileSetResolver,
    HalsteadAnalyzer,
    LineCounter,
    Patterns,
    SymbolSource,
    VersionControl,
)

logger = get_logger(__name__)

# Lexical proxy for a test-case declaration: whitespace then ``it(``
TEST_CASE_PATTERN = re.compile(r"\sit\(", re.IGNORECASE)

# Kinds merged into applicationStats.stats
STAT_KINDS = tuple(kind.value for kind in SymbolKind if kind is not SymbolKind.CONSTRUCTOR)

_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)


def format_snapshot_date(day: date) -> str:
    """``YYYY-M-D`` without zero padding, e.g. ``2024-3-1``."""
    return f"{day.year}-{day.month}-{day.day}"


def count_test_cases(text: str) -> int:
    return len(TEST_CASE_PATTERN.findall(text))


@dataclass
class SnapshotOptions:
    """What to measure for one snapshot."""

    snapshot_date: str
    app_include: Patterns = field(default_factory=lambda: ["**/*.ts"])
    app_exclude: Optional[Patterns] = None
    test_include: Optional[Patterns] = None
    parse_coverage_stats: bool = False
    list_parsed_files: bool = False
    cancellation: Optional[CancellationToken] = None
    file_limit: Optional[int] = None


class _SnapshotAccumulator:
    """Mutable totals shared by the per-file units of one build."""

    def __init__(self, list_parsed_files: bool) -> None:
        self._lock = Lock()
        self.stats: dict[str, int] = {kind: 0 for kind in STAT_KINDS}
        self.loc_excluding_tests = 0
        self.loc_tests_only = 0
        self.test_case_occurrences = 0
        self.app_parsed = 0
        self.test_parsed = 0
        self.halstead = HalsteadAccumulator()
        self.app_paths: Optional[list[str]] = [] if list_parsed_files else None
        self.test_paths: Optional[list[str]] = [] if list_parsed_files else None

    def merge_application(self, path: str, counts: dict[str, int], loc: int) -> None:
        with self._lock:
            for kind, count in counts.items():
                if kind == SymbolKind.CONSTRUCTOR.value:
                    continue
                self.stats[kind] = self.stats.get(kind, 0) + count
            self.loc_excluding_tests += loc
            self.app_parsed += 1
            if self.app_paths is not None:
                self.app_paths.append(path)

    def merge_test(self, path: str, loc: int, occurrences: int) -> None:
        with self._lock:
            self.loc_tests_only += loc
            self.test_case_occurrences += occurrences
            self.test_parsed += 1
            if self.test_paths is not None:
                self.test_paths.append(path)


class SnapshotBuilder:
    """Builds snapshots of one project root from pluggable collaborators."""

    def __init__(
        self,
        root: Path,
        symbol_source: SymbolSource,
        halstead_analyzer: HalsteadAnalyzer,
        file_resolver: FileSetResolver,
        line_counter: LineCounter,
        vcs: Optional[VersionControl] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.root = Path(root)
        self.symbol_source = symbol_source
        self.halstead_analyzer = halstead_analyzer
        self.file_resolver = file_resolver
        self.line_counter = line_counter
        self.vcs = vcs
        self.max_workers = max_workers or _DEFAULT_WORKERS

    def build(self, options: SnapshotOptions, progress: Optional[ProgressTask] = None) -> Snapshot:
        """Measure the working tree.

        Raises:
            OperationCancelledError: cancellation was requested during the build
        """
        token = options.cancellation or CancellationToken()
        progress = progress or ProgressTask()
        token.raise_if_cancelled("snapshot")

        snapshot_hash = self._resolve_hash()
        acc = _SnapshotAccumulator(options.list_parsed_files)

        app_files = self.file_resolver.find_files(
            options.app_include, options.app_exclude, limit=options.file_limit
        )
        if not app_files:
            logger.warning(f"No application files matched {options.app_include!r} in {self.root}")
            return Snapshot(
                snapshot_date=options.snapshot_date,
                snapshot_hash=snapshot_hash,
                application_stats=_empty_application_stats(options.list_parsed_files),
            )

        test_files: Optional[list[str]] = None
        if options.parse_coverage_stats and options.test_include:
            test_files = self.file_resolver.find_files(options.test_include, limit=options.file_limit)
            if not test_files:
                logger.warning(f"No test files matched {options.test_include!r}; skipping coverage stats")
                test_files = None

        units: list[tuple[str, Callable[[], None]]] = [
            (path, self._application_unit(path, acc, token)) for path in app_files
        ]
        if test_files:
            units.extend((path, self._test_unit(path, acc, token)) for path in test_files)

        progress.set_total(len(units))
        logger.debug(f"Measuring {len(app_files)} application and {len(test_files or [])} test files")
        self._run_units(units, token, progress)

        return _finalize(options, snapshot_hash, acc, test_files)

    def _resolve_hash(self) -> Optional[str]:
        if self.vcs is None:
            return None
        snapshot_hash = self.vcs.current_commit_hash(self.root)
        if snapshot_hash is None:
            logger.debug(f"No commit hash for {self.root}; snapshotHash omitted")
        return snapshot_hash

    def _application_unit(
        self, path: str, acc: _SnapshotAccumulator, token: CancellationToken
    ) -> Callable[[], None]:
        def unit() -> None:
            token.raise_if_cancelled(path)
            entry = aggregate(path, self.symbol_source.get_symbols(path))
            loc = self.line_counter.line_count(self.root, path)
            measurements = self.halstead_analyzer.analyze(path)
            acc.merge_application(path, entry.document_nodes, loc)
            acc.halstead.add_all(measurements)

        return unit

    def _test_unit(
        self, path: str, acc: _SnapshotAccumulator, token: CancellationToken
    ) -> Callable[[], None]:
        def unit() -> None:
            token.raise_if_cancelled(path)
            loc = self.line_counter.line_count(self.root, path)
            text = (self.root / path).read_text(encoding="utf-8", errors="replace")
            acc.merge_test(path, loc, count_test_cases(text))

        return unit

    def _run_units(
        self,
        units: list[tuple[str, Callable[[], None]]],
        token: CancellationToken,
        progress: ProgressTask,
    ) -> None:
        cancelled: Optional[OperationCancelledError] = None
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[Future, str] = {}
            for path, unit in units:
                if token.is_cancelled:
                    break
                futures[executor.submit(unit)] = path

            pending = set(futures)
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    progress.advance()
                    if future.cancelled():
                        continue
                    try:
                        future.result()
                    except OperationCancelledError as e:
                        if cancelled is None:
                            cancelled = e
                            for other in pending:
                                other.cancel()
                    except Exception as e:
                        logger.warning(f"Skipping {futures[future]}: {e}")

        if cancelled is None and token.is_cancelled:
            cancelled = OperationCancelledError("snapshot")
        if cancelled is not None:
            raise cancelled


def _empty_application_stats(list_parsed_files: bool) -> ApplicationStats:
    return ApplicationStats(
        stats={kind: 0 for kind in STAT_KINDS},
        metrics=Metrics(gaffney=compute_gaffney(0, 0, 0)),
        documents_parsed_paths=[] if list_parsed_files else None,
    )


def _finalize(
    options: SnapshotOptions,
    snapshot_hash: Optional[str],
    acc: _SnapshotAccumulator,
    test_files: Optional[list[str]],
) -> Snapshot:
    loc_including_tests = acc.loc_excluding_tests + acc.loc_tests_only
    application_stats = ApplicationStats(
        documents_parsed_amount=acc.app_parsed,
        loc_including_tests=loc_including_tests,
        loc_excluding_tests=acc.loc_excluding_tests,
        stats=dict(acc.stats),
        metrics=Metrics(
            gaffney=compute_gaffney(loc_including_tests, acc.loc_excluding_tests, acc.loc_tests_only),
            halstead=acc.halstead.result(),
        ),
        documents_parsed_paths=sorted(acc.app_paths) if acc.app_paths is not None else None,
    )

    coverage_stats = None
    if test_files:
        coverage_stats = CoverageStats(
            documents_parsed_amount=acc.test_parsed,
            loc_tests_only=acc.loc_tests_only,
            test_case_occurrences=acc.test_case_occurrences,
            documents_parsed_paths=sorted(acc.test_paths) if acc.test_paths is not None else None,
        )

    return Snapshot(
        snapshot_date=options.snapshot_date,
        snapshot_hash=snapshot_hash,
        application_stats=application_stats,
        coverage_stats=coverage_stats,
    )
