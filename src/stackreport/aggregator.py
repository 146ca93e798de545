"""Derived views over a profile snapshot."""

import logging
import threading
from collections.abc import Iterator, Mapping

from stackreport.errors import EmptySnapshot, UnknownEdgeTarget
from stackreport.models import Frame, FrameId, ProfileSnapshot

logger = logging.getLogger(__name__)


def percent(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``, or 0.0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return part * 100.0 / whole


def ratio(part: float, whole: float) -> float:
    """Return ``part / whole``, or 0.0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return part / whole


def skip_unknown_edge(log: logging.Logger, caller_id: FrameId, callee_id: FrameId) -> None:
    """Report an edge whose target frame is missing and is being skipped."""
    log.warning("skipping edge: %s", UnknownEdgeTarget(caller_id, callee_id))


def iter_callees(
    frames: Mapping[FrameId, Frame],
    frame_id: FrameId,
    frame: Frame,
) -> Iterator[tuple[FrameId, Frame, int]]:
    """
    Yield ``(callee_id, callee, weight)`` for each outgoing edge of a frame.

    Edges are visited in callee id order. An edge whose target is not in
    ``frames`` is logged and skipped.
    """
    if not frame.edges:
        return
    for callee_id in sorted(frame.edges):
        callee = frames.get(callee_id)
        if callee is None:
            skip_unknown_edge(logger, frame_id, callee_id)
            continue
        yield callee_id, callee, frame.edges[callee_id]


class Aggregator:
    """
    Lazily computed, memoized views over one ProfileSnapshot.

    Every derived value is computed on first access and kept for the life of
    the aggregator. One aggregator can be shared by concurrent renders.
    """

    def __init__(self, snapshot: ProfileSnapshot) -> None:
        self._snapshot = snapshot
        self._lock = threading.Lock()
        self._sorted: dict[bool, tuple[tuple[FrameId, Frame], ...]] = {}
        self._max_samples: int | None = None
        self._file_line_totals: dict[str, dict[int, int]] | None = None
        self._sorted_files: tuple[tuple[str, dict[int, int]], ...] | None = None

    @property
    def snapshot(self) -> ProfileSnapshot:
        """Get the underlying snapshot."""
        return self._snapshot

    @property
    def overall_samples(self) -> int:
        """Get the number of samples collected over the whole run."""
        return self._snapshot.overall_samples

    def overall_percent(self, count: int) -> float:
        """Return ``count`` as a percentage of the overall samples."""
        return percent(count, self._snapshot.overall_samples)

    def sorted_frames(self, by_total: bool = False) -> tuple[tuple[FrameId, Frame], ...]:
        """
        Return all frames by descending weight.

        Args:
            by_total: Sort by inclusive samples instead of self samples.

        Frames of equal weight are ordered by ascending frame id.
        """
        with self._lock:
            cached = self._sorted.get(by_total)
            if cached is None:
                key_func = {
                    True: lambda item: (-item[1].total_samples, item[0]),
                    False: lambda item: (-item[1].samples, item[0]),
                }
                cached = tuple(sorted(self._snapshot.frames.items(), key=key_func[by_total]))
                self._sorted[by_total] = cached
            return cached

    def max_samples(self) -> int:
        """
        Return the largest self sample count of any frame.

        Raises:
            EmptySnapshot: The snapshot has no frames.
        """
        with self._lock:
            if self._max_samples is None:
                if not self._snapshot.frames:
                    raise EmptySnapshot("snapshot has no frames")
                self._max_samples = max(frame.samples for frame in self._snapshot.frames.values())
            return self._max_samples

    def file_line_totals(self) -> dict[str, dict[int, int]]:
        """
        Return per-file, per-line sample totals.

        Only frames with both a file and line samples contribute. Callers
        must treat the returned mapping as read-only.
        """
        with self._lock:
            if self._file_line_totals is None:
                totals: dict[str, dict[int, int]] = {}
                for frame in self._snapshot.frames.values():
                    if frame.file is None or frame.lines is None:
                        continue
                    per_line = totals.setdefault(frame.file, {})
                    for line, count in frame.lines.items():
                        per_line[line] = per_line.get(line, 0) + count
                self._file_line_totals = totals
            return self._file_line_totals

    def sorted_files(self) -> tuple[tuple[str, dict[int, int]], ...]:
        """Return the file rollups, the file with the most line samples first."""
        totals = self.file_line_totals()
        with self._lock:
            if self._sorted_files is None:
                self._sorted_files = tuple(
                    sorted(totals.items(), key=lambda item: (-sum(item[1].values()), item[0]))
                )
            return self._sorted_files
