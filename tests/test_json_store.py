"""Tests for storage/json_store.py - reading and writing index files."""

import json

import pytest

from ts_profitability.exceptions import ParsingError
from ts_profitability.models import ApplicationStats, Index, Snapshot
from ts_profitability.storage import index_to_json, read_index, write_index


@pytest.fixture
def index():
    return Index(
        project_name="shop",
        timestamp=1700000000000,
        current_state=Snapshot(
            snapshot_date="2024-3-1",
            application_stats=ApplicationStats(documents_parsed_amount=3, stats={"class": 3}),
        ),
    )


class TestJsonStore:
    def test_write_creates_parent_dirs(self, tmp_path, index):
        target = write_index(index, tmp_path / "out" / "shop.json")
        assert target.exists()
        data = json.loads(target.read_text())
        assert data["projectName"] == "shop"
        assert data["currentState"]["applicationStats"]["stats"] == {"class": 3}

    def test_read_back(self, tmp_path, index):
        path = write_index(index, tmp_path / "shop.json")
        assert read_index(path) == index

    def test_json_is_indented(self, index):
        assert '\n    "version"' in index_to_json(index)

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ParsingError):
            read_index(path)

    def test_missing_project_name(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"timestamp": 1}')
        with pytest.raises(ParsingError):
            read_index(path)
