"""Tree-sitter parser wrapper for TypeScript and TSX sources.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
    language = detect_language(Path("src/app.tsx"))  # "tsx"
"""

from __future__ import annotations

from pathlib import Path
from threading import local
from typing import Any, Optional

import tree_sitter
import tree_sitter_typescript

from ..exceptions import ParsingError
from ..logging_config import get_logger

logger = get_logger(__name__)

_LANGUAGE_FACTORIES = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_EXTENSION_LANGUAGES = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}


def get_supported_languages() -> list[str]:
    """Languages with an installed grammar."""
    return list(_LANGUAGE_FACTORIES.keys())


def detect_language(path: Path) -> Optional[str]:
    """Grammar name for a file path, or None when the extension is unknown."""
    return _EXTENSION_LANGUAGES.get(path.suffix.lower())


class TreeSitterParser:
    """Wrapper around tree-sitter for the TypeScript grammars.

    ``tree_sitter.Parser`` objects are not shareable across threads, so each
    worker thread lazily gets its own parser per language.
    """

    def __init__(self) -> None:
        self._languages: dict[str, Any] = {
            name: tree_sitter.Language(factory()) for name, factory in _LANGUAGE_FACTORIES.items()
        }
        self._local = local()

    def _parser_for(self, language: str) -> Optional[Any]:
        lang = self._languages.get(language)
        if lang is None:
            return None
        parsers = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = {}
            self._local.parsers = parsers
        parser = parsers.get(language)
        if parser is None:
            parser = tree_sitter.Parser(lang)
            parsers[language] = parser
        return parser

    def parse(self, code: bytes, language: str) -> Optional[Any]:
        """Parse code and return the syntax tree.

        Args:
            code: Source code as bytes
            language: "typescript" or "tsx"

        Returns:
            Tree object, or None if the language is not supported
        """
        parser = self._parser_for(language)
        if parser is None:
            return None
        return parser.parse(code)

    def parse_file(self, path: Path) -> Optional[Any]:
        """Read and parse a file, choosing the grammar from its extension."""
        language = detect_language(path) or "typescript"
        code = path.read_bytes()
        try:
            tree = self.parse(code, language)
        except ValueError as e:
            raise ParsingError(path, language, str(e))
        if tree is not None and tree.root_node.has_error:
            logger.debug(f"Syntax errors while parsing {path}; continuing with partial tree")
        return tree

    def is_language_supported(self, language: str) -> bool:
        return language in self._languages
