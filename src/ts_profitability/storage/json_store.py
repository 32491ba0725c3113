"""Read and write Index documents as JSON files."""

import json
from pathlib import Path
from typing import Union

from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from ..models import Index

logger = get_logger(__name__)

JSON_INDENT = 4


def index_to_json(index: Index) -> str:
    return json.dumps(index.to_dict(), indent=JSON_INDENT)


def write_index(index: Index, path: Union[str, Path]) -> Path:
    """Write ``index`` to ``path``, creating parent directories as needed."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(index_to_json(index) + "\n", encoding="utf-8")
    except OSError as e:
        raise FileAccessError(target, f"Cannot write index: {e}")
    logger.info(f"Wrote index for {index.project_name} to {target}")
    return target


def read_index(path: Union[str, Path]) -> Index:
    """Load an Index previously written by ``write_index``.

    Raises:
        FileAccessError: the file cannot be read
        ParsingError: the file is not a valid index document
    """
    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as e:
        raise FileAccessError(source, f"Cannot read index: {e}")

    try:
        return Index.from_dict(json.loads(raw))
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise ParsingError(source, "json", str(e))
