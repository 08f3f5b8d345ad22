"""covmap: source-position remapping for coverage reports.

Indexes generated source files into lines, applies ``c8``/``t8`` ignore
directives, and maps generated offset ranges back to original sources
through source maps.
"""

from covmap.coverage import FunctionRecord
from covmap.source import IgnoreSegment, Line, SourceIndex, load_source
from covmap.sourcemap import Bias, DecodedSourceMap, MappedRange, map_range_to_original

__version__ = "0.1.0"

__all__ = [
    "Bias",
    "DecodedSourceMap",
    "FunctionRecord",
    "IgnoreSegment",
    "Line",
    "MappedRange",
    "SourceIndex",
    "load_source",
    "map_range_to_original",
]
