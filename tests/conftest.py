"""Shared snapshots for stackreport tests."""

import pytest

from stackreport.aggregator import Aggregator
from stackreport.models import normalize


def make_raw(frames: dict, samples: int = 100) -> dict:
    """Build a raw sampler record around some frame records."""
    return {
        "samples": samples,
        "interval": 1000,
        "mode": "cpu",
        "missed_samples": 3,
        "frames": frames,
    }


@pytest.fixture
def two_frame_raw() -> dict:
    """A calls B; B is owned by that one call site."""
    return make_raw(
        {
            1: {"name": "A", "samples": 40, "total_samples": 100, "edges": {2: 60}},
            2: {"name": "B", "samples": 60, "total_samples": 60},
        }
    )


@pytest.fixture
def two_frame_aggregator(two_frame_raw) -> Aggregator:
    return Aggregator(normalize(two_frame_raw))


@pytest.fixture
def hub_raw() -> dict:
    """
    A small program where ``helper`` is shared by two callers.

    main -> work (70) -> helper (20)
    main -> other (30) -> helper (20)
    """
    return make_raw(
        {
            "main": {"name": "Object#main", "file": "app.rb", "line": 1,
                     "samples": 0, "total_samples": 100,
                     "edges": {"work": 70, "other": 30}},
            "work": {"name": "Worker#work", "file": "worker.rb", "line": 3,
                     "samples": 50, "total_samples": 70,
                     "lines": {4: 30, 5: 20}, "edges": {"helper": 20}},
            "other": {"name": "Other#run", "file": "worker.rb", "line": 20,
                      "samples": 10, "total_samples": 30,
                      "lines": {4: 5}, "edges": {"helper": 20}},
            "helper": {"name": "Util.helper", "file": "util.rb", "line": 7,
                       "samples": 40, "total_samples": 40,
                       "lines": {8: 40}},
        }
    )


@pytest.fixture
def hub_aggregator(hub_raw) -> Aggregator:
    return Aggregator(normalize(hub_raw))


@pytest.fixture
def raw_factory():
    """Factory building raw records, see make_raw()."""
    return make_raw
