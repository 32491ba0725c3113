"""Symbol aggregation: a per-file symbol tree into per-kind counts."""

from __future__ import annotations

from typing import Iterable, Optional

from ..models import DocumentNodeEntry, SymbolNode


def aggregate(path: str, symbols: Optional[Iterable[SymbolNode]]) -> DocumentNodeEntry:
    """Count every symbol in ``symbols`` by kind.

    The returned entry always carries every ``SymbolKind`` as a key. A missing
    or empty symbol list gives the all-zero entry.
    """
    entry = DocumentNodeEntry.empty(path)
    if not symbols:
        return entry
    _visit(symbols, 0, entry)
    return entry


def _visit(symbols: Iterable[SymbolNode], depth: int, entry: DocumentNodeEntry) -> None:
    # depth is carried for diagnostics only
    for symbol in symbols:
        entry.document_nodes[symbol.kind.value] += 1
        if symbol.children:
            _visit(symbol.children, depth + 1, entry)
