"""Line counting with ``wc -l`` semantics: the number of newline bytes."""

from pathlib import Path

from ..exceptions import FileAccessError

_CHUNK_SIZE = 1024 * 1024


def count_lines(path: Path) -> int:
    """Newline count of a file; a last line without a trailing newline is not counted."""
    lines = 0
    with open(path, "rb") as f:
        while True:
            chunk = f.read(_CHUNK_SIZE)
            if not chunk:
                break
            lines += chunk.count(b"\n")
    return lines


class FileLineCounter:
    """Counts lines of files on disk, relative to a project root."""

    def line_count(self, root: Path, path: str) -> int:
        full_path = Path(root) / path
        try:
            return count_lines(full_path)
        except OSError as e:
            raise FileAccessError(full_path, f"Cannot count lines: {e}")
