"""stackreport - interactive Textual frame browser."""

from enum import Enum

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from stackreport.aggregator import Aggregator
from stackreport.models import ProfileSnapshot
from stackreport.renderers.text import format_percent
from stackreport.report import Report


class SortKey(Enum):
    """Sort keys for the frame table."""

    SELF = "samples"
    TOTAL = "total"


class SummaryStats(Static):
    """Header widget showing run-wide sampling statistics."""

    DEFAULT_CSS = """
    SummaryStats {
        height: auto;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, snapshot: ProfileSnapshot, *args, **kwargs) -> None:
        """Initialize SummaryStats."""
        super().__init__(self.describe(snapshot), *args, **kwargs)

    @staticmethod
    def describe(snapshot: ProfileSnapshot) -> str:
        """Get the summary text for a snapshot."""
        return (
            f"Mode: {snapshot.mode} ({snapshot.interval})  "
            f"Samples: {snapshot.overall_samples}  "
            f"Missed: {snapshot.missed_samples}  "
            f"Frames: {len(snapshot.frames)}"
        )


class FrameTable(Container):
    """Container for the ranked frame table."""

    DEFAULT_CSS = """
    FrameTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, aggregator: Aggregator, sort_key: SortKey = SortKey.SELF, *args, **kwargs) -> None:
        """Initialize FrameTable."""
        super().__init__(*args, **kwargs)
        self._aggregator = aggregator
        self._sort_key = sort_key

    @property
    def sort_key(self) -> SortKey:
        """Get current sort key."""
        return self._sort_key

    def cycle_sort(self) -> SortKey:
        """Cycle to the next sort key, refill the table and return the key."""
        keys = list(SortKey)
        self._sort_key = keys[(keys.index(self._sort_key) + 1) % len(keys)]
        if self.is_mounted:
            self._fill()
        return self._sort_key

    def compose(self) -> ComposeResult:
        """Compose the frame table."""
        yield DataTable(id="frame-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#frame-table", DataTable)
        table.cursor_type = "row"

        table.add_column("TOTAL", key="total", width=10)
        table.add_column("(pct)", key="total_pct", width=9)
        table.add_column("SAMPLES", key="samples", width=10)
        table.add_column("(pct)", key="samples_pct", width=9)
        table.add_column("FRAME", key="frame")
        self._fill()

    def _fill(self) -> None:
        """Replace all rows with the frames in the current sort order."""
        table = self.query_one("#frame-table", DataTable)
        table.clear()
        aggregator = self._aggregator
        for frame_id, frame in aggregator.sorted_frames(by_total=self._sort_key is SortKey.TOTAL):
            table.add_row(
                str(frame.total_samples),
                format_percent(aggregator.overall_percent(frame.total_samples)),
                str(frame.samples),
                format_percent(aggregator.overall_percent(frame.samples)),
                frame.name,
                key=frame_id,
            )


class ReportApp(App):
    """Browse the frames of one profile report."""

    TITLE = "stackreport"
    SUB_TITLE = "Sampling Profile Report"

    CSS = """
    Screen {
        layout: vertical;
    }

    #summary-stats {
        dock: top;
        height: auto;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f6", "sort", "Sort"),
    ]

    def __init__(self, report: Report) -> None:
        """Initialize the ReportApp."""
        super().__init__()
        self._report = report

    @property
    def report(self) -> Report:
        """Get the report being browsed."""
        return self._report

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        initial = SortKey.TOTAL if self._report.config.sort_by_total else SortKey.SELF
        yield SummaryStats(self._report.aggregator.snapshot, id="summary-stats")
        yield FrameTable(self._report.aggregator, initial)
        yield Footer()

    def action_sort(self) -> None:
        """Handle sort action - toggle between self and total samples."""
        frame_table = self.query_one(FrameTable)
        new_sort_key = frame_table.cycle_sort()
        self.notify(f"Sort: {new_sort_key.name}")
