"""Map generated offset ranges back to original line/column ranges.

AST ranges are inclusive at the start and exclusive at the end. Source maps
are logically ranges over text too, but they only store the point where
each range starts. Finding the *end* of a generated range in the original
text therefore takes three steps:

1. Find the mapping whose generated range ends at, or exclusively contains,
   the generated end position (look one column back from the end).
2. Find the original position of that mapping.
3. Find where that original range ends: ask for the generated position of
   the next original point to its right, and decode it again. If there is no
   such point, or it decodes onto another original line, the range runs to
   the end of the line.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from covmap.source.line import Line
from covmap.sourcemap.consumer import Bias, OriginalPosition, SourceMapLookup

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MappedRange:
    """Original-source range; ``end_column`` may be ``math.inf``."""

    source: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int | float


def map_range_to_original(
    lines: Sequence[Line],
    source_map: SourceMapLookup,
    start: int,
    end: int,
) -> MappedRange | None:
    """Translate the generated offset range ``[start, end)``.

    Returns None when no line overlaps the range, a bound cannot be
    resolved, a bound has no original source, or the bounds fall in
    different original sources.
    """
    overlapping = _overlapping_lines(lines, start, end)
    if not overlapping:
        log.debug("range_unresolved", reason="no_lines", start=start, end=end)
        return None
    first, last = overlapping[0], overlapping[-1]

    start_pos = original_position_try_both(source_map, first.number, max(0, start - first.start))
    end_pos = original_end_position_for(source_map, last.number, end - last.start)

    if end_pos is None or start_pos.line is None:
        log.debug("range_unresolved", reason="unmapped", start=start, end=end)
        return None
    if start_pos.source is None or end_pos.source is None:
        log.debug("range_unresolved", reason="no_source", start=start, end=end)
        return None
    if start_pos.source != end_pos.source:
        log.debug("range_unresolved", reason="cross_source", start=start, end=end)
        return None

    if start_pos.line == end_pos.line and start_pos.column == end_pos.column:
        after = source_map.original_position_for(
            last.number, end - last.start, Bias.LEAST_UPPER_BOUND
        )
        if after.line is None or after.column is None:
            log.debug("range_unresolved", reason="collapsed", start=start, end=end)
            return None
        end_pos = OriginalPosition(
            source=end_pos.source, line=after.line, column=after.column - 1
        )

    return MappedRange(
        source=start_pos.source,
        start_line=start_pos.line,
        start_column=int(start_pos.column),
        end_line=end_pos.line,  # type: ignore[arg-type]
        end_column=end_pos.column,  # type: ignore[arg-type]
    )


def original_end_position_for(
    source_map: SourceMapLookup, line: int, column: int
) -> OriginalPosition | None:
    """Original position where the generated range ending at ``column`` ends."""
    before_end = original_position_try_both(source_map, line, max(column - 1, 0))
    if before_end.source is None or before_end.line is None or before_end.column is None:
        return None

    after_end = source_map.generated_position_for(
        before_end.source,
        before_end.line,
        int(before_end.column) + 1,
        Bias.LEAST_UPPER_BOUND,
    )
    if after_end.line is None or after_end.column is None:
        return _unbounded(before_end)

    decoded = source_map.original_position_for(after_end.line, after_end.column)
    if decoded.line != before_end.line:
        return _unbounded(before_end)
    return decoded


def original_position_try_both(
    source_map: SourceMapLookup, line: int, column: int
) -> OriginalPosition:
    """Nearest mapping at or before the point, else nearest at or after."""
    original = source_map.original_position_for(line, column, Bias.GREATEST_LOWER_BOUND)
    if original.line is None:
        return source_map.original_position_for(line, column, Bias.LEAST_UPPER_BOUND)
    return original


def _unbounded(position: OriginalPosition) -> OriginalPosition:
    return OriginalPosition(source=position.source, line=position.line, column=math.inf)


def _overlapping_lines(lines: Sequence[Line], start: int, end: int) -> list[Line]:
    # An empty range still selects the line containing ``start``.
    last = max(end - 1, start)
    return [line for line in lines if line.start <= last and start < line.end]
