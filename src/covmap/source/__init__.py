"""Source indexing: lines, line-level and range-style ignore directives."""

from covmap.source.grammars import GRAMMARS, Grammar
from covmap.source.ignore import IgnoreSegment, resolve_ignore_segments
from covmap.source.index import SourceIndex, load_source
from covmap.source.line import Line

__all__ = [
    "GRAMMARS",
    "Grammar",
    "IgnoreSegment",
    "Line",
    "SourceIndex",
    "load_source",
    "resolve_ignore_segments",
]
