"""Report renderers. Each returns a list of output lines without newlines."""

from stackreport.renderers.callgrind import render_callgrind
from stackreport.renderers.graphviz import render_graphviz
from stackreport.renderers.source import render_source
from stackreport.renderers.text import render_debug, render_files, render_text

__all__ = [
    "render_callgrind",
    "render_debug",
    "render_files",
    "render_graphviz",
    "render_source",
    "render_text",
]
