"""JSON persistence of Index documents."""

from .json_store import index_to_json, read_index, write_index

__all__ = ["index_to_json", "read_index", "write_index"]
