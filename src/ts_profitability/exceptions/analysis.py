"""Analysis-related exceptions: file access, parsing, cancellation."""

from pathlib import Path
from typing import Optional

from .base import ProfitabilityError


class AnalysisError(ProfitabilityError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class OperationCancelledError(AnalysisError):
    """Raised inside a unit of work once cancellation has been requested.

    Coordinators catch it and stop cleanly, keeping what was collected.
    """

    def __init__(self, stage: Optional[str] = None):
        details = {"stage": stage} if stage else None
        super().__init__("Operation cancelled", details=details)
        self.stage = stage
