"""Source listings annotated with per-line samples."""

import logging

from stackreport.aggregator import Aggregator, percent
from stackreport.errors import SourceUnavailable
from stackreport.models import Frame
from stackreport.pruner import NamePattern

logger = logging.getLogger(__name__)

# Lines shown past the declaration when a frame has no line samples
DEFAULT_CONTEXT = 5

BLANK_GUTTER = " " * 25


def _annotate_frame(aggregator: Aggregator, frame: Frame) -> list[str]:
    """Return the annotated listing of one frame, or raise SourceUnavailable."""
    if frame.file is None:
        raise SourceUnavailable(frame.name, None, "frame has no source file")

    first = frame.line or 1
    last = max(frame.lines) if frame.lines else first + DEFAULT_CONTEXT
    listing = []
    try:
        with open(frame.file, encoding="utf-8", errors="replace") as f:
            # ``index`` is 0-based; shown line numbers are 1-based
            for index, code in enumerate(f):
                if index > last:
                    break
                if index < first - 1:
                    continue
                code = code.rstrip("\r\n")
                samples = frame.lines.get(index + 1) if frame.lines else None
                if samples is not None:
                    listing.append(
                        "%5d %7s / %7s  | %5d  | %s"
                        % (
                            samples,
                            "(%2.1f%%" % aggregator.overall_percent(samples),
                            "%2.1f%%)" % percent(samples, frame.samples),
                            index + 1,
                            code,
                        )
                    )
                else:
                    listing.append("%s| %5d  | %s" % (BLANK_GUTTER, index + 1, code))
    except OSError as exc:
        raise SourceUnavailable(frame.name, frame.file, exc.strerror or str(exc)) from exc
    return listing


def render_source(aggregator: Aggregator, pattern: NamePattern) -> list[str]:
    """
    Render annotated source for every frame whose name matches ``pattern``.

    Each frame gets a ``name (file:line)`` heading followed by its source
    window. A frame whose file cannot be read gets a placeholder line and a
    logged warning; other frames are still rendered.
    """
    lines = []
    for _, frame in aggregator.sorted_frames():
        if not pattern.matches(frame.name):
            continue
        lines.append("%s (%s:%d)" % (frame.name, frame.file or "?", frame.line or 1))
        try:
            lines.extend(_annotate_frame(aggregator, frame))
        except SourceUnavailable as exc:
            logger.warning("%s", exc)
            lines.append("%s| source unavailable: %s" % (BLANK_GUTTER, exc.reason))
    return lines
