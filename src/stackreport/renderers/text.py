"""Plain text reports: the ranked frame table, file rollups and a raw dump."""

from pprint import pformat

from stackreport.aggregator import Aggregator

HEADER = "%10s    (pct)  %10s    (pct)     FRAME" % ("TOTAL", "SAMPLES")


def format_percent(value: float) -> str:
    """Format a percentage the way every table column shows it."""
    return "(%2.1f%%)" % value


def render_text(aggregator: Aggregator, by_total: bool = False) -> list[str]:
    """
    Render the ranked frame table.

    Args:
        aggregator: Views over the snapshot to render.
        by_total: Rank by inclusive samples instead of self samples.
    """
    lines = [HEADER]
    for _, frame in aggregator.sorted_frames(by_total):
        lines.append(
            "%10d %8s  %10d %8s     %s"
            % (
                frame.total_samples,
                format_percent(aggregator.overall_percent(frame.total_samples)),
                frame.samples,
                format_percent(aggregator.overall_percent(frame.samples)),
                frame.name,
            )
        )
    return lines


def render_files(aggregator: Aggregator) -> list[str]:
    """Render per-file line sample totals, the busiest file first."""
    lines = []
    for file, per_line in aggregator.sorted_files():
        total = sum(per_line.values())
        lines.append("%10d %8s  %s" % (total, format_percent(aggregator.overall_percent(total)), file))
        for line in sorted(per_line):
            lines.append("%10d %8s  %s:%d" % (per_line[line], "", file, line))
    return lines


def render_debug(aggregator: Aggregator) -> list[str]:
    """Pretty-print the whole snapshot in its raw record shape."""
    return pformat(aggregator.snapshot.to_raw(), sort_dicts=False).splitlines()
