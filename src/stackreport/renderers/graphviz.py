"""Graphviz (dot) call-graph output."""

from collections.abc import Mapping

from stackreport.aggregator import Aggregator, iter_callees, percent, ratio
from stackreport.models import Frame, FrameId
from stackreport.pruner import DOMINANCE_FACTOR, GraphPruner, NamePattern

MIN_FONTSIZE = 10.0
MAX_FONTSIZE = 38.0
MIN_PENWIDTH = 0.5
MAX_PENWIDTH = 2.5


def escape(text: str) -> str:
    """Escape a string for use inside a quoted dot ID."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote(text: str) -> str:
    """Quote a string as a dot ID."""
    return f'"{escape(text)}"'


def _scale(fraction: float, low: float, high: float) -> float:
    return low + fraction * (high - low)


def _sample_label(frame: Frame, overall: int) -> str:
    # \r is a right-justified line break in dot labels
    label = ""
    if frame.samples < frame.total_samples:
        label += "%d (%2.1f%%)\\rof " % (frame.samples, percent(frame.samples, overall))
    label += "%d (%2.1f%%)\\r" % (frame.total_samples, percent(frame.total_samples, overall))
    return label


def render_graphviz(
    aggregator: Aggregator,
    pattern: NamePattern | None = None,
    dominance: float = DOMINANCE_FACTOR,
) -> list[str]:
    """
    Render the call graph as a dot digraph.

    Args:
        aggregator: Views over the snapshot to render.
        pattern: When given, only the subgraph relevant to frames matching
            this pattern is drawn (see GraphPruner).
        dominance: Edge dominance factor used when pruning.
    """
    frames: Mapping[FrameId, Frame] = dict(aggregator.sorted_frames())
    if pattern is not None:
        frames = GraphPruner(pattern, dominance=dominance).prune(frames)

    overall = aggregator.overall_samples
    lines = ["digraph profile {"]
    for frame_id, frame in frames.items():
        fontsize = _scale(ratio(frame.samples, aggregator.max_samples()), MIN_FONTSIZE, MAX_FONTSIZE)
        size = _scale(ratio(frame.total_samples, overall), MIN_PENWIDTH, MAX_PENWIDTH)
        label = f'"{escape(frame.name)}\\n{_sample_label(frame, overall)}"'
        lines.append(
            f'  {quote(frame_id)} [size="{size:.2f}"] [fontsize="{fontsize:.2f}"]'
            f' [penwidth="{size:.2f}"] [shape=box] [label={label}];'
        )
        for callee_id, _, weight in iter_callees(frames, frame_id, frame):
            edge_size = _scale(ratio(weight, overall), MIN_PENWIDTH, MAX_PENWIDTH)
            lines.append(
                f'  {quote(frame_id)} -> {quote(callee_id)} [label="{weight}"]'
                f' [weight="{weight}"] [penwidth="{edge_size:.2f}"];'
            )
    lines.append("}")
    return lines
