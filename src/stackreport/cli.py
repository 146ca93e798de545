"""Command line entry point for stackreport."""

import argparse
import logging
import sys

from stackreport.config import PatternMode, ReportConfig
from stackreport.errors import ReportError
from stackreport.models import load_snapshot
from stackreport.report import Report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stackreport",
        description="Render a captured sampling profile.",
    )
    parser.add_argument("profile", help="JSON dump of the profile snapshot")

    formats = parser.add_mutually_exclusive_group()
    formats.add_argument("--text", action="store_const", dest="format", const="text",
                         help="ranked frame table (default)")
    formats.add_argument("--files", action="store_const", dest="format", const="files",
                         help="per-file line sample totals")
    formats.add_argument("--debug", action="store_const", dest="format", const="debug",
                         help="dump the raw snapshot")
    formats.add_argument("--graphviz", action="store_const", dest="format", const="graphviz",
                         help="call graph in dot format")
    formats.add_argument("--callgrind", action="store_const", dest="format", const="callgrind",
                         help="callgrind cost profile")
    formats.add_argument("--source", metavar="NAME",
                         help="annotate the source of frames matching NAME")
    formats.add_argument("--tui", action="store_const", dest="format", const="tui",
                         help="browse frames interactively")

    parser.add_argument("--sort-total", action="store_true",
                        help="rank frames by total instead of self samples")
    parser.add_argument("--filter", metavar="PATTERN",
                        help="only graph frames relevant to PATTERN")
    parser.add_argument("--regex", action="store_true",
                        help="treat NAME and PATTERN as regular expressions")
    parser.add_argument("-o", "--output", metavar="FILE",
                        help="write to FILE instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log debug diagnostics")
    parser.set_defaults(format="text")
    return parser


def render(report: Report, args: argparse.Namespace) -> list[str]:
    """Render the format selected on the command line."""
    if args.source is not None:
        return report.source(args.source)
    renderers = {
        "text": report.text,
        "files": report.files,
        "debug": report.debug,
        "callgrind": report.callgrind,
        "graphviz": lambda: report.graphviz(args.filter),
    }
    return renderers[args.format]()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the stackreport command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = ReportConfig(
        sort_by_total=args.sort_total,
        pattern_mode=PatternMode.REGEX if args.regex else PatternMode.SUBSTRING,
    )
    try:
        report = Report(load_snapshot(args.profile), config)
        if args.format == "tui":
            from stackreport.app import ReportApp

            ReportApp(report).run()
            return 0
        lines = render(report, args)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                report.write(lines, f)
        else:
            report.write(lines, sys.stdout)
    except (ReportError, OSError) as exc:
        print(f"stackreport: error: {exc}", file=sys.stderr)
        return 1
    logger.debug("wrote %d lines", len(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
