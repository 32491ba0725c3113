"""Tests for snapshot/walker.py - the month-by-month historical walk."""

from datetime import date

import pytest
from conftest import StubVersionControl

from ts_profitability.core import CancellationToken
from ts_profitability.exceptions import AnalysisError, InvalidConfigError, OperationCancelledError
from ts_profitability.models import Snapshot
from ts_profitability.snapshot import HistoricalWalker, WalkOptions, add_month, iter_months

TODAY = date(2024, 3, 15)


class FakeBuilder:
    """Returns an empty snapshot per call; optional hooks per snapshot date."""

    def __init__(self, fail_on=None, on_build=None):
        self.fail_on = fail_on or {}
        self.on_build = on_build
        self.options = []

    def build(self, options):
        self.options.append(options)
        if self.on_build is not None:
            self.on_build(options)
        if options.snapshot_date in self.fail_on:
            raise self.fail_on[options.snapshot_date]
        return Snapshot(snapshot_date=options.snapshot_date)


def make_walker(tmp_path, builder=None, vcs=None):
    return HistoricalWalker(
        tmp_path,
        builder or FakeBuilder(),
        vcs or StubVersionControl(),
        clock=lambda: TODAY,
    )


class TestIterMonths:
    def test_inclusive_range(self):
        months = list(iter_months(date(2023, 11, 1), date(2024, 2, 1)))
        assert months == [date(2023, 11, 1), date(2023, 12, 1), date(2024, 1, 1), date(2024, 2, 1)]

    def test_single_month(self):
        assert list(iter_months(date(2024, 3, 1), date(2024, 3, 1))) == [date(2024, 3, 1)]

    def test_start_after_end_is_empty(self):
        assert list(iter_months(date(2024, 4, 1), date(2024, 3, 1))) == []

    def test_add_month_rolls_year(self):
        assert add_month(date(2023, 12, 1)) == date(2024, 1, 1)

    def test_add_month_spills_past_short_months(self):
        assert add_month(date(2023, 1, 31)) == date(2023, 3, 3)
        assert add_month(date(2024, 1, 31)) == date(2024, 3, 2)
        assert add_month(date(2023, 3, 31)) == date(2023, 5, 1)

    def test_day_of_month_is_not_renormalized(self):
        months = list(iter_months(date(2023, 1, 31), date(2023, 5, 31)))
        assert months == [date(2023, 1, 31), date(2023, 3, 3), date(2023, 4, 3), date(2023, 5, 3)]


class TestWalk:
    def test_one_snapshot_per_month_in_order(self, tmp_path):
        walker = make_walker(tmp_path)
        snapshots = walker.walk(WalkOptions(start_year=2023, start_month=11))
        assert [s.snapshot_date for s in snapshots] == [
            "2023-11-1",
            "2023-12-1",
            "2024-1-1",
            "2024-2-1",
            "2024-3-1",
        ]

    def test_checks_out_branch_around_the_walk(self, tmp_path):
        vcs = StubVersionControl(commits={(2024, 2): "c-feb", (2024, 3): "c-mar"})
        walker = make_walker(tmp_path, vcs=vcs)
        walker.walk(WalkOptions(start_year=2024, start_month=2, branch="main"))
        assert vcs.checkouts == ["main", "c-feb", "c-mar", "main"]

    def test_missing_commit_keeps_working_tree(self, tmp_path):
        vcs = StubVersionControl(commits={(2024, 3): "c-mar"})
        builder = FakeBuilder()
        walker = make_walker(tmp_path, builder=builder, vcs=vcs)
        snapshots = walker.walk(WalkOptions(start_year=2024, start_month=1))
        assert len(snapshots) == 3
        assert vcs.checkouts == ["dev", "c-mar", "dev"]

    def test_snapshot_options_carry_patterns(self, tmp_path):
        builder = FakeBuilder()
        walker = make_walker(tmp_path, builder=builder)
        walker.walk(
            WalkOptions(
                start_year=2024,
                start_month=3,
                app_include=["src/**/*.ts"],
                test_include=["**/*.spec.ts"],
                parse_coverage_stats=True,
                file_limit=50,
            )
        )
        options = builder.options[0]
        assert options.snapshot_date == "2024-3-1"
        assert options.app_include == ["src/**/*.ts"]
        assert options.test_include == ["**/*.spec.ts"]
        assert options.parse_coverage_stats is True
        assert options.file_limit == 50

    def test_failed_month_is_skipped(self, tmp_path):
        builder = FakeBuilder(fail_on={"2024-1-1": AnalysisError("boom")})
        walker = make_walker(tmp_path, builder=builder)
        snapshots = walker.walk(WalkOptions(start_year=2023, start_month=12))
        assert [s.snapshot_date for s in snapshots] == ["2023-12-1", "2024-2-1", "2024-3-1"]

    def test_branch_restored_when_build_crashes(self, tmp_path):
        vcs = StubVersionControl()
        builder = FakeBuilder(fail_on={"2024-2-1": RuntimeError("unexpected")})
        walker = make_walker(tmp_path, builder=builder, vcs=vcs)
        with pytest.raises(RuntimeError):
            walker.walk(WalkOptions(start_year=2024, start_month=1))
        assert vcs.checkouts[-1] == "dev"


class TestWalkCancellation:
    def test_cancel_between_months_keeps_collected(self, tmp_path):
        token = CancellationToken()

        def cancel_after_two(options):
            if len(builder.options) == 2:
                token.cancel()

        builder = FakeBuilder(on_build=cancel_after_two)
        walker = make_walker(tmp_path, builder=builder)
        snapshots = walker.walk(WalkOptions(start_year=2023, start_month=11, cancellation=token))
        assert [s.snapshot_date for s in snapshots] == ["2023-11-1", "2023-12-1"]
        assert len(builder.options) == 2

    def test_cancel_during_build_drops_that_month(self, tmp_path):
        vcs = StubVersionControl()
        builder = FakeBuilder(fail_on={"2024-1-1": OperationCancelledError("snapshot")})
        walker = make_walker(tmp_path, builder=builder, vcs=vcs)
        snapshots = walker.walk(WalkOptions(start_year=2023, start_month=11))
        assert [s.snapshot_date for s in snapshots] == ["2023-11-1", "2023-12-1"]
        assert vcs.checkouts[-1] == "dev"

    def test_cancelled_before_start_returns_nothing(self, tmp_path):
        token = CancellationToken()
        token.cancel()
        builder = FakeBuilder()
        walker = make_walker(tmp_path, builder=builder)
        assert walker.walk(WalkOptions(start_year=2024, start_month=1, cancellation=token)) == []
        assert builder.options == []


class TestInvalidRange:
    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_month_out_of_range(self, tmp_path, month):
        vcs = StubVersionControl()
        walker = make_walker(tmp_path, vcs=vcs)
        with pytest.raises(InvalidConfigError):
            walker.walk(WalkOptions(start_year=2024, start_month=month))
        assert vcs.checkouts == []

    def test_start_after_current_month(self, tmp_path):
        vcs = StubVersionControl()
        walker = make_walker(tmp_path, vcs=vcs)
        with pytest.raises(InvalidConfigError):
            walker.walk(WalkOptions(start_year=2024, start_month=4))
        assert vcs.checkouts == []

    @pytest.mark.parametrize("year", [0, -5, 10000])
    def test_year_out_of_range(self, tmp_path, year):
        vcs = StubVersionControl()
        walker = make_walker(tmp_path, vcs=vcs)
        with pytest.raises(InvalidConfigError):
            walker.walk(WalkOptions(start_year=year, start_month=1))
        assert vcs.checkouts == []
