"""Tests for scanning/treesitter_parser.py - TypeScript grammar wrapper."""

from pathlib import Path

from ts_profitability.scanning import TreeSitterParser, detect_language, get_supported_languages


class TestLanguageDetection:
    def test_supported_languages(self):
        assert set(get_supported_languages()) == {"typescript", "tsx"}

    def test_detect_by_extension(self):
        assert detect_language(Path("a.ts")) == "typescript"
        assert detect_language(Path("a.mts")) == "typescript"
        assert detect_language(Path("a.tsx")) == "tsx"
        assert detect_language(Path("a.py")) is None


class TestTreeSitterParser:
    def test_parse_typescript(self):
        tree = TreeSitterParser().parse(b"const x: number = 1;\n", "typescript")
        assert tree.root_node.type == "program"
        assert not tree.root_node.has_error

    def test_parse_tsx(self):
        tree = TreeSitterParser().parse(b"const el = <div>hi</div>;\n", "tsx")
        assert not tree.root_node.has_error

    def test_unknown_language_returns_none(self):
        assert TreeSitterParser().parse(b"x", "cobol") is None
        assert not TreeSitterParser().is_language_supported("cobol")

    def test_parse_file_with_syntax_errors_returns_tree(self, tmp_path):
        source = tmp_path / "broken.ts"
        source.write_text("class {{{ ;\n")
        tree = TreeSitterParser().parse_file(source)
        assert tree is not None
        assert tree.root_node.has_error
