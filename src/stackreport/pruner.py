"""
Relevant-subgraph extraction for call-graph visualization.

Pruning starts from every frame whose name matches a pattern and follows
only *dominant* call edges: an edge ``caller -> callee`` of weight ``w`` is
followed when ``callee.total_samples <= w * 1.2``, i.e. this one call site
accounts for at least ~83% of everything the callee costs. This is not a
reachability closure. Following every edge would pull in most of the
program as soon as a root calls into a shared hub (allocation, logging,
hashing), whereas dominant edges only reach callees that effectively belong
to the matched code.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from types import MappingProxyType

from stackreport.aggregator import skip_unknown_edge
from stackreport.errors import InvalidPattern
from stackreport.models import Frame, FrameId

DOMINANCE_FACTOR = 1.2


class NamePattern:
    """Predicate matching frame names by substring or regular expression."""

    __slots__ = ("_regex", "text")

    def __init__(self, regex: re.Pattern[str], text: str) -> None:
        self._regex = regex
        self.text = text

    @classmethod
    def substring(cls, text: str) -> "NamePattern":
        """Match names that contain ``text`` literally."""
        return cls(re.compile(re.escape(text)), text)

    @classmethod
    def regex(cls, pattern: str | re.Pattern[str]) -> "NamePattern":
        """Match names where ``pattern`` is found anywhere (``re.search``)."""
        if isinstance(pattern, re.Pattern):
            return cls(pattern, pattern.pattern)
        try:
            return cls(re.compile(pattern), pattern)
        except re.error as exc:
            raise InvalidPattern(f"invalid name pattern {pattern!r}: {exc}") from exc

    def matches(self, name: str) -> bool:
        """Check whether a frame name matches."""
        return self._regex.search(name) is not None

    def __repr__(self) -> str:
        return f"NamePattern({self._regex.pattern!r})"


class GraphPruner:
    """
    Extract the frames relevant to a name pattern.

    Marks live in a set local to each call, so one pruner (or many) can
    run repeatedly or concurrently over the same shared frames.
    """

    def __init__(
        self,
        pattern: NamePattern,
        dominance: float = DOMINANCE_FACTOR,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the GraphPruner.

        Args:
            pattern: Frames whose name matches are the roots.
            dominance: Callee total over edge weight ratio up to which an
                edge is followed. Default 1.2.
            logger: Diagnostics sink. Defaults to this module's logger.
        """
        self._pattern = pattern
        self._dominance = dominance
        self._log = logger if logger is not None else logging.getLogger(__name__)

    @property
    def pattern(self) -> NamePattern:
        """Get the root name pattern."""
        return self._pattern

    def roots(self, frames: Mapping[FrameId, Frame]) -> list[FrameId]:
        """Return the ids of all frames whose name matches the pattern."""
        return [frame_id for frame_id, frame in frames.items() if self._pattern.matches(frame.name)]

    def is_dominant(self, callee: Frame, weight: int) -> bool:
        """Check whether an edge of ``weight`` owns ``callee``."""
        return callee.total_samples <= weight * self._dominance

    def mark(self, frames: Mapping[FrameId, Frame]) -> frozenset[FrameId]:
        """Return the ids of all frames reachable from the roots via dominant edges."""
        marked: set[FrameId] = set()
        stack = self.roots(frames)

        while stack:
            frame_id = stack.pop()
            if frame_id in marked:
                continue
            marked.add(frame_id)

            frame = frames[frame_id]
            if not frame.edges:
                continue
            self._log.debug("expanding %s edges=%r", frame.name, frame.edges)
            for callee_id, weight in frame.edges.items():
                callee = frames.get(callee_id)
                if callee is None:
                    skip_unknown_edge(self._log, frame_id, callee_id)
                    continue
                if callee_id not in marked and self.is_dominant(callee, weight):
                    stack.append(callee_id)

        return frozenset(marked)

    def prune(self, frames: Mapping[FrameId, Frame]) -> dict[FrameId, Frame]:
        """
        Return the relevant subgraph of ``frames``.

        The result keeps the input order. Retained frames are copies whose
        edges only point at other retained frames; ``frames`` is not changed.
        """
        marked = self.mark(frames)
        subgraph: dict[FrameId, Frame] = {}
        for frame_id, frame in frames.items():
            if frame_id not in marked:
                continue
            if frame.edges is not None:
                edges = {callee: weight for callee, weight in frame.edges.items() if callee in marked}
                frame = replace(frame, edges=MappingProxyType(edges))
            subgraph[frame_id] = frame
        return subgraph
