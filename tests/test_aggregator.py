"""Tests for the Aggregator derived views."""

import logging
import random
import threading

import pytest

from stackreport.aggregator import Aggregator, iter_callees, percent, ratio
from stackreport.errors import EmptySnapshot
from stackreport.models import normalize


def test_percent_guards_zero():
    """Test percentages of an empty whole are 0.0."""
    assert percent(5, 0) == 0.0
    assert percent(0, 0) == 0.0
    assert percent(25, 100) == 25.0


def test_ratio_guards_zero():
    """Test ratios of an empty whole are 0.0."""
    assert ratio(3, 0) == 0.0
    assert ratio(3, 4) == 0.75


class TestSortedFrames:
    """Tests for Aggregator.sorted_frames()."""

    def test_by_total(self, two_frame_aggregator):
        """Test frames rank by inclusive samples."""
        ids = [frame_id for frame_id, _ in two_frame_aggregator.sorted_frames(by_total=True)]
        assert ids == ["1", "2"]

    def test_by_self(self, two_frame_aggregator):
        """Test frames rank by self samples by default."""
        ids = [frame_id for frame_id, _ in two_frame_aggregator.sorted_frames()]
        assert ids == ["2", "1"]

    def test_non_increasing(self, hub_aggregator):
        """Test both orders are non-increasing in their weight."""
        totals = [f.total_samples for _, f in hub_aggregator.sorted_frames(by_total=True)]
        selfs = [f.samples for _, f in hub_aggregator.sorted_frames(by_total=False)]

        assert totals == sorted(totals, reverse=True)
        assert selfs == sorted(selfs, reverse=True)

    def test_ties_are_deterministic(self, raw_factory):
        """Test equal-weight frames get the same order whatever the input order."""
        records = {str(i): {"name": f"f{i}", "samples": 5, "total_samples": 5} for i in range(20)}
        keys = list(records)
        orders = set()
        for _ in range(5):
            random.shuffle(keys)
            aggregator = Aggregator(normalize(raw_factory({k: records[k] for k in keys})))
            orders.add(tuple(frame_id for frame_id, _ in aggregator.sorted_frames()))

        assert len(orders) == 1

    def test_memoized(self, hub_aggregator):
        """Test repeated calls return the cached sequence."""
        assert hub_aggregator.sorted_frames() is hub_aggregator.sorted_frames()
        assert hub_aggregator.sorted_frames(True) is hub_aggregator.sorted_frames(True)


class TestMaxSamples:
    """Tests for Aggregator.max_samples()."""

    def test_max_samples(self, hub_aggregator):
        """Test the largest self sample count is found."""
        assert hub_aggregator.max_samples() == 50

    def test_empty_snapshot(self, raw_factory):
        """Test max_samples() is undefined without frames."""
        aggregator = Aggregator(normalize(raw_factory({})))

        with pytest.raises(EmptySnapshot):
            aggregator.max_samples()


class TestFileLineTotals:
    """Tests for per-file line rollups."""

    def test_totals(self, hub_aggregator):
        """Test lines of frames sharing a file are summed by file."""
        totals = hub_aggregator.file_line_totals()

        assert totals == {
            "worker.rb": {4: 35, 5: 20},
            "util.rb": {8: 40},
        }

    def test_frames_without_lines_contribute_nothing(self, hub_aggregator):
        """Test a file only known from a frame without lines is absent."""
        assert "app.rb" not in hub_aggregator.file_line_totals()

    def test_sums_match_frames(self, hub_aggregator):
        """Test each file total equals the sum over its frames' lines."""
        totals = hub_aggregator.file_line_totals()
        frames = hub_aggregator.snapshot.frames.values()

        for file, per_line in totals.items():
            expected = sum(sum(f.lines.values()) for f in frames if f.file == file and f.lines)
            assert sum(per_line.values()) == expected

    def test_independent_of_frame_order(self, hub_raw):
        """Test the rollup is the same for any frame iteration order."""
        items = list(hub_raw["frames"].items())
        reversed_raw = dict(hub_raw, frames=dict(reversed(items)))

        first = Aggregator(normalize(hub_raw)).file_line_totals()
        second = Aggregator(normalize(reversed_raw)).file_line_totals()

        assert first == second

    def test_memoized(self, hub_aggregator):
        """Test repeated calls return the cached mapping."""
        assert hub_aggregator.file_line_totals() is hub_aggregator.file_line_totals()

    def test_sorted_files(self, hub_aggregator):
        """Test files are ordered by their summed samples."""
        assert [file for file, _ in hub_aggregator.sorted_files()] == ["worker.rb", "util.rb"]


def test_model_invariants(hub_aggregator):
    """Test the sample snapshot satisfies the model invariants."""
    for _, frame in hub_aggregator.sorted_frames():
        assert frame.total_samples >= frame.samples >= 0
        for weight in (frame.edges or {}).values():
            assert weight <= frame.total_samples


def test_iter_callees_skips_unknown_targets(raw_factory, caplog):
    """Test an edge to a missing frame is skipped with a warning."""
    snapshot = normalize(
        raw_factory(
            {
                "a": {"name": "A", "samples": 1, "total_samples": 9, "edges": {"zz": 3, "b": 5}},
                "b": {"name": "B", "samples": 5, "total_samples": 5},
            }
        )
    )

    with caplog.at_level(logging.WARNING):
        callees = list(iter_callees(snapshot.frames, "a", snapshot.frames["a"]))

    assert [(callee_id, weight) for callee_id, _, weight in callees] == [("b", 5)]
    assert "skipping edge: frame 'a' calls unknown frame 'zz'" in caplog.text


def test_concurrent_access(hub_aggregator):
    """Test concurrent first access yields one shared cached result."""
    results = []

    def worker() -> None:
        results.append(
            (hub_aggregator.sorted_frames(), hub_aggregator.file_line_totals(), hub_aggregator.max_samples())
        )

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(result[0] is results[0][0] for result in results)
    assert all(result[1] is results[0][1] for result in results)
    assert {result[2] for result in results} == {50}
