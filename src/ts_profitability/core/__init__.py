"""Cancellation and progress reporting shared by the builder and the walker."""

from .progress import CancellationToken, ProgressReporter, ProgressTask, SilentReporter

__all__ = [
    "CancellationToken",
    "ProgressReporter",
    "ProgressTask",
    "SilentReporter",
]
