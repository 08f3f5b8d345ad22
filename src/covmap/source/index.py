"""Line index over one source file.

The index is built once per file: the right-trimmed text is split into
contiguous ``Line`` records, line-level ``c8 ignore next`` directives are
applied, and (when a grammar is given) range-style ``t8 ignore`` directives
are resolved into ignore segments. Everything afterwards is a read.

Line directives::

    /* c8 ignore next */        ignore this line and the next one
    /* c8 ignore next 3 */      ignore this line and the next three
    // c8 ignore next 2         same, as a line comment
    foo() /* c8 ignore next */  ignore only this line
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from covmap.core.logging import bind_source_file, clear_source_file
from covmap.source.grammars import get_grammar
from covmap.source.ignore import IgnoreSegment, resolve_ignore_segments
from covmap.source.line import Line

if TYPE_CHECKING:
    from covmap.config.models import CovmapConfig
    from covmap.sourcemap.consumer import SourceMapLookup
    from covmap.sourcemap.mapping import MappedRange

log = structlog.get_logger(__name__)

_LINE_SPLIT_RE = re.compile(r"(?<=\n)")
_IGNORE_NEXT_BLOCK_RE = re.compile(r"^\W*/\* c8 ignore next (?P<count>[0-9]+)? *\*/\W*$")
_IGNORE_NEXT_LINE_RE = re.compile(r"^\s*// c8 ignore next(?: (?P<count>[0-9]+))?\s*$")
_IGNORE_INLINE_RE = re.compile(r"/\* c8 ignore next \*/")
_SHEBANG_RE = re.compile(r"#!.*")


class SourceIndex:
    """Addressable view of one source file.

    Args:
        source: Raw source text. Trailing whitespace is trimmed.
        wrapper_length: Length of a module-wrapper prefix the runtime put in
            front of the source; a leading shebang line is subtracted from it.
        parser: Grammar name (see ``covmap.source.grammars.GRAMMARS``) used to
            resolve ``t8 ignore`` directives, or None to skip that pass.
    """

    def __init__(self, source: str, wrapper_length: int = 0, parser: str | None = None) -> None:
        source = source.rstrip()
        self.eof = len(source)
        self.shebang_length = _shebang_length(source)
        self.wrapper_length = wrapper_length - self.shebang_length
        self.lines: list[Line] = _build_lines(source)
        self.ignore_segments: tuple[IgnoreSegment, ...] = ()
        if parser is not None:
            self.ignore_segments = resolve_ignore_segments(source, get_grammar(parser))
            _mark_covered_lines(self.lines, self.ignore_segments)
        self._starts = [line.start for line in self.lines]
        log.debug(
            "source_indexed",
            lines=len(self.lines),
            ignored_lines=sum(1 for line in self.lines if line.ignored),
            ignore_segments=len(self.ignore_segments),
            parser=parser,
        )

    def line_at(self, offset: int) -> Line | None:
        """Line containing ``offset``; ``eof`` belongs to the final line."""
        if offset < 0 or offset > self.eof:
            return None
        return self.lines[bisect.bisect_right(self._starts, offset) - 1]

    def line(self, number: int) -> Line:
        if not 1 <= number <= len(self.lines):
            raise IndexError(f"line {number} out of range 1..{len(self.lines)}")
        return self.lines[number - 1]

    def is_ignored(self, number: int) -> bool:
        if not 1 <= number <= len(self.lines):
            return False
        return self.lines[number - 1].ignored

    def is_offset_ignored(self, offset: int) -> bool:
        return any(segment.contains(offset) for segment in self.ignore_segments)

    def offset_of_line_start(self, number: int) -> int:
        return self.line(number).start

    def offset_of_line_end(self, number: int) -> int:
        return self.line(number).end

    def relative_to_offset(self, line: int, column: int) -> int:
        """Absolute offset of a line/column, clamped to that line's extent."""
        line = max(line, 1)
        if line > len(self.lines):
            return self.eof
        record = self.lines[line - 1]
        return max(record.start, min(record.start + column, record.end))

    def map_range_to_original(
        self, source_map: SourceMapLookup, start: int, end: int
    ) -> MappedRange | None:
        """Original-source range for ``[start, end)``, or None if unresolved."""
        from covmap.sourcemap.mapping import map_range_to_original

        return map_range_to_original(self.lines, source_map, start, end)


def load_source(
    path: Path,
    *,
    wrapper_length: int = 0,
    config: CovmapConfig | None = None,
) -> SourceIndex:
    """Read ``path`` and index it, choosing the grammar from configuration."""
    from covmap.config.models import CovmapConfig

    config = config or CovmapConfig()
    bind_source_file(path)
    try:
        return SourceIndex(
            path.read_text(encoding="utf-8"),
            wrapper_length=wrapper_length,
            parser=config.parser.parser_for(path),
        )
    finally:
        clear_source_file()


def _build_lines(source: str) -> list[Line]:
    lines: list[Line] = []
    position = 0
    ignore_count = 0
    for i, text in enumerate(_LINE_SPLIT_RE.split(source)):
        line = Line.from_text(i + 1, position, text)
        if ignore_count > 0:
            line.ignored = True
            ignore_count -= 1
        else:
            ignore_count = _parse_ignore_next(text, line)
        lines.append(line)
        position += len(text)
    return lines


def _parse_ignore_next(text: str, line: Line) -> int:
    """Apply a ``c8 ignore next`` directive; return how many following lines it covers."""
    match = _IGNORE_NEXT_BLOCK_RE.match(text) or _IGNORE_NEXT_LINE_RE.match(text)
    if match:
        line.ignored = True
        count = match.group("count")
        return int(count) if count else 1
    if _IGNORE_INLINE_RE.search(text):
        line.ignored = True
    return 0


def _mark_covered_lines(lines: Sequence[Line], segments: Sequence[IgnoreSegment]) -> None:
    for segment in segments:
        for line in lines:
            if segment.start <= line.start and line.end <= segment.end:
                line.ignored = True


def _shebang_length(source: str) -> int:
    if not source.startswith("#!"):
        return 0
    match = _SHEBANG_RE.match(source)
    return len(match.group(0)) if match else 0
