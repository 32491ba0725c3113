"""Version-control oracle backed by the ``git`` executable.

Every call shells out with ``git -C <root>``. Failures (git missing, not a
repository, unknown branch, timeout) are logged and reported as ``None`` or
``False``; they never raise.
"""

import subprocess
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


class GitVersionControl:
    """Reads and moves the checkout of a git working tree."""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    def _run(self, root: Path, *args: str) -> Optional[subprocess.CompletedProcess]:
        cmd = ["git", "-C", str(root), *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning(f"git {args[0]} failed: {e}")
            return None
        if result.returncode != 0:
            logger.debug(f"git {' '.join(args)} exited {result.returncode}: {result.stderr.strip()}")
            return None
        return result

    def is_repository(self, root: Path) -> bool:
        return self._run(root, "rev-parse", "--git-dir") is not None

    def current_commit_hash(self, root: Path) -> Optional[str]:
        """Full hash of HEAD, or None outside a repository."""
        result = self._run(root, "rev-parse", "HEAD")
        if result is None:
            return None
        return result.stdout.strip() or None

    def nearest_commit_before(self, root: Path, branch: str, year: int, month: int) -> Optional[str]:
        """Newest commit on ``branch`` made before the first day of the month."""
        before = f"--before={year:04d}-{month:02d}-01 00:00"
        result = self._run(root, "rev-list", "--max-count=1", before, branch)
        if result is None:
            return None
        commit = result.stdout.strip()
        if not commit:
            logger.debug(f"No commit on {branch} before {year}-{month:02d}-01")
            return None
        return commit

    def checkout(self, root: Path, ref: str) -> bool:
        result = self._run(root, "checkout", "--quiet", ref)
        if result is None:
            logger.warning(f"git checkout {ref} failed in {root}")
            return False
        return True
