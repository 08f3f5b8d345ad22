"""Source map decoding and generated-to-original range mapping."""

from covmap.sourcemap.consumer import (
    Bias,
    DecodedSourceMap,
    GeneratedPosition,
    OriginalPosition,
    SourceMapLookup,
    SourceMapping,
)
from covmap.sourcemap.mapping import (
    MappedRange,
    map_range_to_original,
    original_end_position_for,
    original_position_try_both,
)

__all__ = [
    "Bias",
    "DecodedSourceMap",
    "GeneratedPosition",
    "MappedRange",
    "OriginalPosition",
    "SourceMapLookup",
    "SourceMapping",
    "map_range_to_original",
    "original_end_position_for",
    "original_position_try_both",
]
