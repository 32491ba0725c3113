"""Tests for core/progress.py - cancellation token and reporters."""

import io

import pytest
from rich.console import Console

from ts_profitability.core import CancellationToken, ProgressReporter, ProgressTask, SilentReporter
from ts_profitability.exceptions import OperationCancelledError


class TestCancellationToken:
    def test_starts_uncancelled(self):
        token = CancellationToken()
        assert not token.is_cancelled
        token.raise_if_cancelled()

    def test_cancel(self):
        token = CancellationToken()
        token.cancel()
        assert token.is_cancelled
        with pytest.raises(OperationCancelledError) as exc_info:
            token.raise_if_cancelled("src/a.ts")
        assert exc_info.value.stage == "src/a.ts"


class TestReporters:
    def test_silent_reporter_runs_task(self):
        result = SilentReporter().with_progress("work", lambda task: 41 + 1)
        assert result == 42

    def test_unbound_task_is_noop(self):
        task = ProgressTask()
        task.set_total(3)
        task.advance()
        task.describe("x")

    def test_rich_reporter_runs_task(self):
        console = Console(file=io.StringIO(), force_terminal=False)

        def work(task):
            task.set_total(2)
            task.advance()
            task.advance()
            return "done"

        assert ProgressReporter(console).with_progress("work", work) == "done"
