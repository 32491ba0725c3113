"""Shared fixtures and collaborator stubs for ts-profitability tests."""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

import pytest

from ts_profitability.models import HalsteadMeasurement, OperationCount, SymbolKind, SymbolNode

GIT_AVAILABLE = shutil.which("git") is not None


def node(kind: SymbolKind, *children: SymbolNode, name: str = "x") -> SymbolNode:
    return SymbolNode(kind, name, tuple(children))


def measurement(
    length=10.0,
    vocabulary=5.0,
    volume=23.2,
    difficulty=2.5,
    effort=58.0,
    time=3.2,
    bugs=0.0077,
    operands=4,
    operators=6,
) -> HalsteadMeasurement:
    return HalsteadMeasurement(
        length=length,
        vocabulary=vocabulary,
        volume=volume,
        difficulty=difficulty,
        effort=effort,
        time=time,
        bugs=bugs,
        operands=OperationCount(total=operands, distinct=operands),
        operators=OperationCount(total=operators, distinct=operators),
    )


class StubSymbolSource:
    """Returns canned symbol trees; paths in ``failing`` raise."""

    def __init__(self, trees=None, failing=None, on_call=None):
        self.trees = trees or {}
        self.failing = failing or {}
        self.on_call = on_call
        self.calls = []

    def get_symbols(self, path):
        self.calls.append(path)
        if self.on_call is not None:
            self.on_call(path)
        if path in self.failing:
            raise self.failing[path]
        return self.trees.get(path, [])


class StubHalsteadAnalyzer:
    def __init__(self, measurements=None):
        self.measurements = measurements or {}

    def analyze(self, path):
        return list(self.measurements.get(path, []))


class StubFileSetResolver:
    """Maps the first include pattern to a fixed file list."""

    def __init__(self, files_by_pattern=None):
        self.files_by_pattern = files_by_pattern or {}
        self.calls = []

    def find_files(self, include, exclude=None, limit=None):
        self.calls.append((include, exclude, limit))
        key = include if isinstance(include, str) else include[0]
        files = sorted(self.files_by_pattern.get(key, []))
        return files[:limit] if limit is not None else files


class StubLineCounter:
    def __init__(self, lines=None, default=0):
        self.lines = lines or {}
        self.default = default

    def line_count(self, root, path):
        return self.lines.get(path, self.default)


class StubVersionControl:
    """Commits keyed by (year, month); records every checkout."""

    def __init__(self, commits=None, head: Optional[str] = "f" * 40, checkout_ok=True):
        self.commits = commits or {}
        self.head = head
        self.checkout_ok = checkout_ok
        self.checkouts = []

    def current_commit_hash(self, root):
        return self.head

    def nearest_commit_before(self, root, branch, year, month):
        return self.commits.get((year, month))

    def checkout(self, root, ref):
        self.checkouts.append(ref)
        if self.checkout_ok:
            self.head = ref
        return self.checkout_ok


def run_git(repo: Path, *args: str, date: Optional[str] = None) -> str:
    env = dict(os.environ)
    if date is not None:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    result = subprocess.run(
        [
            "git",
            "-C",
            str(repo),
            "-c",
            "user.name=Test",
            "-c",
            "user.email=test@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        capture_output=True,
        text=True,
        env=env,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, rel: str, content: str, date: str) -> str:
    """Write a file, commit it at ``date`` and return the new hash."""
    target = repo / rel
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    run_git(repo, "add", rel)
    run_git(repo, "commit", "-q", "-m", f"update {rel}", date=date)
    return run_git(repo, "rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path):
    """Empty repository whose initial branch is ``dev``."""
    if not GIT_AVAILABLE:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "symbolic-ref", "HEAD", "refs/heads/dev")
    return repo


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """No user/project config files or TS_PROFITABILITY_* variables leak in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TS_PROFITABILITY_"):
            monkeypatch.delenv(key)
    return tmp_path
