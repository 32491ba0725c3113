"""Tests for scanning/files.py - glob pattern resolution."""

import warnings

import pytest

from ts_profitability.config import ProfilerConfig
from ts_profitability.scanning import GlobFileSetResolver, expand_braces


@pytest.fixture
def project(tmp_path):
    for rel in [
        "src/app.ts",
        "src/shop/cart.ts",
        "src/shop/cart.spec.ts",
        "src/shop/cart-spec.ts",
        "src/types.d.ts",
        "e2e/home.po.ts",
        "src/view.tsx",
        "README.md",
        "node_modules/lib/index.ts",
        ".git/hooks/pre-commit.ts",
    ]:
        target = tmp_path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("// file\n")
    return tmp_path


class TestExpandBraces:
    def test_no_braces(self):
        assert expand_braces("**/*.ts") == ["**/*.ts"]

    def test_single_group(self):
        assert expand_braces("*.{ts,tsx}") == ["*.ts", "*.tsx"]

    def test_two_groups(self):
        assert expand_braces("*{.,-}{po,spec}.ts") == ["*.po.ts", "*.spec.ts", "*-po.ts", "*-spec.ts"]


class TestGlobFileSetResolver:
    def test_include_only(self, project):
        files = GlobFileSetResolver(project).find_files("**/*.ts")
        assert files == [
            "e2e/home.po.ts",
            "src/app.ts",
            "src/shop/cart-spec.ts",
            "src/shop/cart.spec.ts",
            "src/shop/cart.ts",
            "src/types.d.ts",
        ]

    def test_node_modules_and_git_never_descended(self, project):
        files = GlobFileSetResolver(project).find_files(["**/*.ts", "node_modules/**"])
        assert not any(f.startswith(("node_modules/", ".git/")) for f in files)

    def test_default_exclusions(self, project):
        config = ProfilerConfig()
        files = GlobFileSetResolver(project).find_files(config.app_include, config.app_exclude)
        assert files == ["src/app.ts", "src/shop/cart.ts"]

    def test_default_test_pattern(self, project):
        config = ProfilerConfig()
        assert GlobFileSetResolver(project).find_files(config.test_include) == ["src/shop/cart.spec.ts"]

    def test_brace_exclusion(self, project):
        files = GlobFileSetResolver(project).find_files("**/*.ts", "*{.,-}{po,spec,d}.ts")
        assert files == ["src/app.ts", "src/shop/cart.ts"]

    def test_brace_include(self, project):
        files = GlobFileSetResolver(project).find_files("src/*.{ts,tsx}")
        assert files == ["src/app.ts", "src/types.d.ts", "src/view.tsx"]

    def test_limit_truncates_sorted_result(self, project):
        files = GlobFileSetResolver(project).find_files("**/*.ts", limit=2)
        assert files == ["e2e/home.po.ts", "src/app.ts"]

    def test_empty_include_matches_nothing(self, project):
        assert GlobFileSetResolver(project).find_files([]) == []

    def test_no_match(self, project):
        assert GlobFileSetResolver(project).find_files("**/*.java") == []

    def test_matching_raises_no_deprecation_warnings(self, project):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            files = GlobFileSetResolver(project).find_files("src/**/*.ts", exclude="**/*.{d,spec}.ts")
        assert "src/app.ts" in files
        assert "src/types.d.ts" not in files
