"""Progress reporting and cooperative cancellation.

``ProgressReporter`` wraps a rich progress bar; ``SilentReporter`` runs the
same callbacks without output (tests and --quiet mode).
"""

import threading
from typing import Callable, Optional, TypeVar

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ..exceptions import OperationCancelledError

T = TypeVar("T")


class CancellationToken:
    """Thread-safe flag a caller sets to stop a running build or walk."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, stage: Optional[str] = None) -> None:
        if self._event.is_set():
            raise OperationCancelledError(stage)


class ProgressTask:
    """Handle passed to a running task; no-op unless bound to a rich task."""

    def __init__(self, progress: Optional[Progress] = None, task_id: Optional[TaskID] = None):
        self._progress = progress
        self._task_id = task_id

    def set_total(self, total: int) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, total=total)

    def advance(self, amount: int = 1) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.advance(self._task_id, amount)

    def describe(self, description: str) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, description=description)


class ProgressReporter:
    """Rich progress bar wrapper."""

    def __init__(self, console: Console):
        self.console = console

    def with_progress(self, title: str, task: Callable[[ProgressTask], T]) -> T:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task_id = progress.add_task(title, total=None)
            return task(ProgressTask(progress, task_id))


class SilentReporter:
    """No-op reporter for tests and --quiet mode."""

    def with_progress(self, title: str, task: Callable[[ProgressTask], T]) -> T:
        return task(ProgressTask())
