"""TypeScript source scanning: file sets, symbol trees, Halstead tokens."""

from .files import GlobFileSetResolver, expand_braces
from .halstead import TreeSitterHalsteadAnalyzer, halstead_from_counts
from .symbols import TreeSitterSymbolSource, symbols_from_tree
from .treesitter_parser import TreeSitterParser, detect_language, get_supported_languages

__all__ = [
    "GlobFileSetResolver",
    "expand_braces",
    "TreeSitterHalsteadAnalyzer",
    "halstead_from_counts",
    "TreeSitterSymbolSource",
    "symbols_from_tree",
    "TreeSitterParser",
    "detect_language",
    "get_supported_languages",
]
