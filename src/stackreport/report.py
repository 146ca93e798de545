"""Report session tying a snapshot, its aggregates and the renderers together."""

from collections.abc import Iterable
from typing import TextIO

from stackreport.aggregator import Aggregator
from stackreport.config import ReportConfig
from stackreport.models import ProfileSnapshot
from stackreport.renderers import (
    render_callgrind,
    render_debug,
    render_files,
    render_graphviz,
    render_source,
    render_text,
)


class Report:
    """
    One reporting session over an immutable snapshot.

    All renderers share a single Aggregator, so derived values are computed
    at most once per session.
    """

    def __init__(self, snapshot: ProfileSnapshot, config: ReportConfig | None = None) -> None:
        self._config = config if config is not None else ReportConfig()
        self._aggregator = Aggregator(snapshot)

    @property
    def config(self) -> ReportConfig:
        """Get the session configuration."""
        return self._config

    @property
    def aggregator(self) -> Aggregator:
        """Get the shared aggregator."""
        return self._aggregator

    def text(self) -> list[str]:
        return render_text(self._aggregator, by_total=self._config.sort_by_total)

    def files(self) -> list[str]:
        return render_files(self._aggregator)

    def debug(self) -> list[str]:
        return render_debug(self._aggregator)

    def graphviz(self, name_filter: str | None = None) -> list[str]:
        """Render the call graph, pruned around ``name_filter`` if given."""
        pattern = self._config.build_pattern(name_filter) if name_filter else None
        return render_graphviz(self._aggregator, pattern, dominance=self._config.dominance)

    def callgrind(self) -> list[str]:
        return render_callgrind(
            self._aggregator,
            creator=self._config.callgrind_creator,
            cmd=self._config.callgrind_cmd,
        )

    def source(self, name: str) -> list[str]:
        """Render annotated source for frames whose name matches ``name``."""
        return render_source(self._aggregator, self._config.build_pattern(name))

    @staticmethod
    def write(lines: Iterable[str], stream: TextIO) -> None:
        """Write rendered lines to a text stream, one per line."""
        for line in lines:
            stream.write(line)
            stream.write("\n")
