"""stackreport - render captured sampling-profiler results."""

from stackreport.aggregator import Aggregator
from stackreport.config import PatternMode, ReportConfig
from stackreport.models import Frame, ProfileSnapshot, load_snapshot, normalize
from stackreport.pruner import GraphPruner, NamePattern
from stackreport.report import Report

__all__ = [
    "Aggregator",
    "Frame",
    "GraphPruner",
    "NamePattern",
    "PatternMode",
    "ProfileSnapshot",
    "Report",
    "ReportConfig",
    "load_snapshot",
    "normalize",
]
