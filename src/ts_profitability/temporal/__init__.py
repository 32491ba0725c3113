"""Version-control oracle and line counting."""

from .git import GitVersionControl
from .lines import FileLineCounter, count_lines

__all__ = [
    "GitVersionControl",
    "FileLineCounter",
    "count_lines",
]
