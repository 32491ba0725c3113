"""Protocol classes for the collaborators the snapshot engine depends on."""

from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from .models import HalsteadMeasurement, SymbolNode

Patterns = Union[str, Sequence[str]]


class SymbolSource(Protocol):
    """Returns the symbol tree of one file (top-level symbols, children nested)."""

    def get_symbols(self, path: str) -> list[SymbolNode]: ...


class HalsteadAnalyzer(Protocol):
    """Returns one Halstead measurement per function in a file."""

    def analyze(self, path: str) -> list[HalsteadMeasurement]: ...


class FileSetResolver(Protocol):
    """Resolves include/exclude glob patterns to root-relative file paths."""

    def find_files(
        self, include: Patterns, exclude: Optional[Patterns] = None, limit: Optional[int] = None
    ) -> list[str]: ...


class LineCounter(Protocol):
    def line_count(self, root: Path, path: str) -> int: ...


class VersionControl(Protocol):
    """Read and move the working tree's position in history."""

    def current_commit_hash(self, root: Path) -> Optional[str]: ...

    def nearest_commit_before(self, root: Path, branch: str, year: int, month: int) -> Optional[str]: ...

    def checkout(self, root: Path, ref: str) -> bool: ...
