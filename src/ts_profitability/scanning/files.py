"""File-set resolution: include/exclude glob patterns -> root-relative paths.

Patterns use gitignore-style wildcards (``*``, ``**``, ``?``) and may contain
``{a,b}`` brace groups, which are expanded before matching. A pattern with no
slash matches at any depth, so ``*.ts`` and ``**/*.ts`` select the same files.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from ..logging_config import get_logger
from ..protocols import Patterns

logger = get_logger(__name__)

# Never descended, whatever the patterns say
SKIP_DIRS = frozenset({".git", "node_modules"})

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` groups: ``*.{ts,tsx}`` -> ``["*.ts", "*.tsx"]``."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        for candidate in expand_braces(head + option + tail):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def _as_list(patterns: Optional[Patterns]) -> list[str]:
    if patterns is None:
        return []
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def build_spec(patterns: Optional[Patterns]) -> Optional[pathspec.GitIgnoreSpec]:
    lines: list[str] = []
    for pattern in _as_list(patterns):
        lines.extend(expand_braces(pattern))
    if not lines:
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


class GlobFileSetResolver:
    """Walks a project tree and returns files matching the patterns."""

    def __init__(self, root: Path, follow_symlinks: bool = False) -> None:
        self.root = Path(root)
        self.follow_symlinks = follow_symlinks

    def find_files(
        self, include: Patterns, exclude: Optional[Patterns] = None, limit: Optional[int] = None
    ) -> list[str]:
        """Sorted POSIX paths relative to the root; at most ``limit`` entries."""
        include_spec = build_spec(include)
        if include_spec is None:
            return []
        exclude_spec = build_spec(exclude)

        matched = [
            rel
            for rel in self._walk()
            if include_spec.match_file(rel) and not (exclude_spec and exclude_spec.match_file(rel))
        ]
        matched.sort()
        if limit is not None and len(matched) > limit:
            logger.debug(f"Truncating {len(matched)} matches to limit {limit}")
            matched = matched[:limit]
        return matched

    def _walk(self) -> Iterable[str]:
        for dirpath, dirnames, filenames in os.walk(self.root, followlinks=self.follow_symlinks):
            dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]
            rel_dir = Path(dirpath).relative_to(self.root)
            for filename in filenames:
                yield (rel_dir / filename).as_posix()
