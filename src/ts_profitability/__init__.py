"""
ts-profitability - structural complexity and test posture of TypeScript code

Counts source constructs per symbol kind, lines of code, Halstead measures and
a Gaffney bug estimate for a TypeScript project, either for the working tree
as it is now or as a month-by-month series walked through git history.
"""

__version__ = "0.1.0"

from .api import capture_current_state, capture_history
from .models import Index, Snapshot, SymbolKind
from .storage import read_index, write_index

__all__ = [
    "capture_current_state",
    "capture_history",
    "Index",
    "Snapshot",
    "SymbolKind",
    "read_index",
    "write_index",
]
