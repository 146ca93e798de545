"""Callgrind cost-profile output, readable by KCachegrind and friends."""

from stackreport.aggregator import Aggregator, iter_callees


def render_callgrind(
    aggregator: Aggregator,
    creator: str = "stackreport",
    cmd: str = "profile",
) -> list[str]:
    """
    Render the snapshot in the callgrind format.

    Samples are reported as the ``Instructions`` event with line positions.
    Calls to frames missing from the snapshot are left out.
    """
    snapshot = aggregator.snapshot
    lines = [
        "version: 1",
        f"creator: {creator}",
        "pid: 0",
        f"cmd: {cmd}",
        "part: 1",
        f"desc: mode: {snapshot.mode}({snapshot.interval})",
        f"desc: missed: {snapshot.missed_samples}",
        "positions: line",
        "events: Instructions",
        f"summary: {snapshot.overall_samples}",
    ]

    for frame_id, frame in aggregator.sorted_frames():
        lines.append(f"fl={frame.file or ''}")
        lines.append(f"fn={frame.name}")
        if frame.lines:
            for line in sorted(frame.lines):
                lines.append(f"{line} {frame.lines[line]}")
        for _, callee, weight in iter_callees(snapshot.frames, frame_id, frame):
            if callee.file != frame.file:
                lines.append(f"cfl={callee.file or ''}")
            lines.append(f"cfn={callee.name}")
            lines.append(f"calls={weight} {frame.line or 0}")
            lines.append(f"{callee.line or 0} {weight}")
        lines.append("")

    lines.append(f"totals: {snapshot.overall_samples}")
    return lines
