"""Data models for stackreport."""

import json
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from os import PathLike
from types import MappingProxyType
from typing import Any

from stackreport.errors import MalformedSnapshot, UnknownFrame

FrameId = str


def canonical_frame_id(value: Hashable) -> FrameId:
    """Return the single string form used for every frame id."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


@dataclass(slots=True, frozen=True)
class Frame:
    """Immutable sampling statistics for one call-stack location."""

    name: str
    samples: int  # Self samples
    total_samples: int  # Inclusive samples
    file: str | None = None
    line: int | None = None
    lines: Mapping[int, int] | None = None
    edges: Mapping[FrameId, int] | None = None


@dataclass(slots=True, frozen=True)
class ProfileSnapshot:
    """
    Immutable result of one profiling run.

    Caches built on top of a snapshot (see Aggregator) are never
    invalidated, so a snapshot must not change after construction.
    """

    overall_samples: int
    interval: int
    mode: str
    missed_samples: int
    frames: Mapping[FrameId, Frame]

    def lookup(self, frame_id: Hashable) -> Frame:
        """Return the frame for an id, raising UnknownFrame if absent."""
        key = canonical_frame_id(frame_id)
        try:
            return self.frames[key]
        except KeyError:
            raise UnknownFrame(key) from None

    def to_raw(self) -> dict[str, Any]:
        """Return the snapshot in the raw record shape normalize() accepts."""
        frames: dict[str, Any] = {}
        for frame_id, frame in self.frames.items():
            record: dict[str, Any] = {
                "name": frame.name,
                "samples": frame.samples,
                "total_samples": frame.total_samples,
            }
            if frame.file is not None:
                record["file"] = frame.file
            if frame.line is not None:
                record["line"] = frame.line
            if frame.lines is not None:
                record["lines"] = dict(frame.lines)
            if frame.edges is not None:
                record["edges"] = dict(frame.edges)
            frames[frame_id] = record
        return {
            "samples": self.overall_samples,
            "interval": self.interval,
            "mode": self.mode,
            "missed_samples": self.missed_samples,
            "frames": frames,
        }


def _required(record: Mapping[str, Any], key: str, frame_id: FrameId) -> Any:
    try:
        return record[key]
    except KeyError:
        raise MalformedSnapshot(f"frame {frame_id!r} is missing {key!r}") from None


def _mapping(value: Any, what: str) -> Any:
    if value is not None and not isinstance(value, Mapping):
        raise MalformedSnapshot(f"{what} must be a mapping, not {type(value).__name__}")
    return value


def _line_counts(frame_id: FrameId, lines: Mapping[Any, int]) -> Mapping[int, int]:
    try:
        return MappingProxyType({int(line): count for line, count in lines.items()})
    except (TypeError, ValueError):
        raise MalformedSnapshot(f"frame {frame_id!r} has a non-numeric line number") from None


def _normalize_frame(frame_id: FrameId, record: Any) -> Frame:
    if not isinstance(record, Mapping):
        raise MalformedSnapshot(f"frame {frame_id!r} must be a mapping, not {type(record).__name__}")
    lines = _mapping(record.get("lines"), f"lines of frame {frame_id!r}")
    edges = _mapping(record.get("edges"), f"edges of frame {frame_id!r}")
    return Frame(
        name=_required(record, "name", frame_id),
        samples=_required(record, "samples", frame_id),
        total_samples=_required(record, "total_samples", frame_id),
        file=record.get("file"),
        line=record.get("line"),
        lines=_line_counts(frame_id, lines) if lines is not None else None,
        edges=(
            MappingProxyType(
                {canonical_frame_id(callee): weight for callee, weight in edges.items()}
            )
            if edges is not None
            else None
        ),
    )


def normalize(raw: Mapping[str, Any]) -> ProfileSnapshot:
    """
    Build a ProfileSnapshot from a raw sampler record.

    Frame ids (both the keys of ``frames`` and the keys of every ``edges``
    mapping) are converted to their canonical string form. Internal
    inconsistencies such as ``samples > total_samples`` are kept as-is.

    Raises:
        MalformedSnapshot: ``frames`` or ``samples`` is absent, or a frame
            record lacks ``name``, ``samples`` or ``total_samples``.
    """
    for key in ("frames", "samples"):
        if key not in raw or raw[key] is None:
            raise MalformedSnapshot(f"snapshot is missing {key!r}")

    frames = {}
    for key, record in _mapping(raw["frames"], "snapshot frames").items():
        frame_id = canonical_frame_id(key)
        frames[frame_id] = _normalize_frame(frame_id, record)

    return ProfileSnapshot(
        overall_samples=raw["samples"],
        interval=raw.get("interval") or 0,
        mode=raw.get("mode") or "",
        missed_samples=raw.get("missed_samples") or 0,
        frames=MappingProxyType(frames),
    )


def loads_snapshot(text: str) -> ProfileSnapshot:
    """Parse a JSON dump of a raw snapshot."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedSnapshot(f"snapshot is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise MalformedSnapshot("snapshot must be a JSON object")
    return normalize(raw)


def load_snapshot(path: str | PathLike[str]) -> ProfileSnapshot:
    """Read a JSON snapshot dump from disk."""
    with open(path, encoding="utf-8") as f:
        return loads_snapshot(f.read())
