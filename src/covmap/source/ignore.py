"""Range-style ignore directives resolved against a tree-sitter syntax tree.

A comment such as ``// t8 ignore next`` or ``/* t8 ignore rest */`` names
the syntactic construct that follows it. Resolution finds that construct by
a depth-first descent that threads the boundaries of the neighbouring
siblings down the tree:

- ``next``: ``[previous sibling end, next sibling start)``
- ``rest``: ``[previous sibling end, enclosing block end)``

A node with no previous (next) sibling uses its parent's start (end) as the
boundary. The resulting end is then pushed past any directly following
``\\n``, ``;`` or ``}`` characters so terminators are not left behind as
uncovered fragments.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

import structlog
from tree_sitter import Node

from covmap.core.errors import SourceParseError
from covmap.source.grammars import Grammar, parse

log = structlog.get_logger(__name__)

_DIRECTIVE_RE = re.compile(r"^\s*t8 ignore (\S*)")
_KEYWORDS = frozenset({"next", "rest"})
_TERMINATORS = frozenset("\n;}")


@dataclass(frozen=True, slots=True)
class IgnoreSegment:
    """Half-open ``[start, end)`` offset range excluded from coverage."""

    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass(frozen=True, slots=True)
class _Target:
    """Node a directive refers to, with its sibling boundaries."""

    node: Node
    prev_end: int
    next_start: int
    ancestors: tuple[Node, ...]


class _CharOffsets:
    """Translate UTF-8 byte offsets reported by tree-sitter into str indices."""

    def __init__(self, source: str, data: bytes) -> None:
        self._table: list[int] | None = None
        if len(source) != len(data):
            table: list[int] = []
            for index, char in enumerate(source):
                table.extend([index] * len(char.encode("utf-8")))
            table.append(len(source))
            self._table = table

    def __call__(self, byte_offset: int) -> int:
        if self._table is None:
            return byte_offset
        return self._table[byte_offset]


def resolve_ignore_segments(source: str, grammar: Grammar) -> tuple[IgnoreSegment, ...]:
    """Parse ``source`` and compute one segment per resolvable directive.

    Raises:
        SourceParseError: If the grammar is unavailable or the source does
            not parse cleanly.
    """
    data = source.encode("utf-8")
    root = parse(grammar, data).root_node
    if root.has_error:
        line, column = _first_error_point(root)
        raise SourceParseError.syntax_error(grammar.name, line, column)

    to_char = _CharOffsets(source, data)
    segments: list[IgnoreSegment] = []
    for comment in _comments(root, grammar):
        keyword = _directive_keyword(data[comment.start_byte : comment.end_byte])
        if keyword is None:
            continue
        span = (comment.start_byte, comment.end_byte)
        target = _find_target(span, root, grammar, None, root.start_byte, root.end_byte, ())
        if target is None:
            log.debug("ignore_directive_without_target", keyword=keyword, offset=to_char(span[0]))
            continue
        raw = _range_for(keyword, target, grammar)
        if raw is None:
            log.debug("ignore_directive_without_block", keyword=keyword, offset=to_char(span[0]))
            continue
        start = to_char(raw[0])
        end = _absorb_terminators(source, to_char(raw[1]))
        segments.append(IgnoreSegment(start, end))
        log.debug("ignore_segment_resolved", keyword=keyword, start=start, end=end)
    return tuple(segments)


def _directive_keyword(raw: bytes) -> str | None:
    text = raw.decode("utf-8")
    if text.startswith("//"):
        value = text[2:]
    elif text.startswith("/*"):
        value = text[2:-2] if text.endswith("*/") else text[2:]
    else:
        value = text
    match = _DIRECTIVE_RE.match(value)
    if match is None or match.group(1) not in _KEYWORDS:
        return None
    return match.group(1)


def _comments(node: Node, grammar: Grammar) -> Iterator[Node]:
    if node.type in grammar.comment_types:
        yield node
        return
    for child in node.children:
        yield from _comments(child, grammar)


def _child_nodes(node: Node, grammar: Grammar) -> list[Node]:
    excluded = grammar.comment_types | grammar.skip_types
    return [child for child in node.named_children if child.type not in excluded]


def _find_target(
    comment: tuple[int, int],
    node: Node,
    grammar: Grammar,
    prev_range: tuple[int, int] | None,
    prev_end: int,
    next_start: int,
    ancestors: tuple[Node, ...],
) -> _Target | None:
    start, end = node.start_byte, node.end_byte
    if ancestors:
        # Comment before the first child, or between the previous sibling and this node.
        if prev_range is None and comment[1] <= start:
            return _Target(node, prev_end, next_start, ancestors)
        if prev_range is not None and prev_range[1] <= comment[0] and start >= comment[1]:
            return _Target(node, prev_end, next_start, ancestors)
        if start > comment[0] or end < comment[1]:
            return None

    children = _child_nodes(node, grammar)
    lineage = (*ancestors, node)
    previous: tuple[int, int] | None = None
    for i, child in enumerate(children):
        found = _find_target(
            comment,
            child,
            grammar,
            previous,
            children[i - 1].end_byte if i > 0 else start,
            children[i + 1].start_byte if i + 1 < len(children) else end,
            lineage,
        )
        if found is not None:
            return found
        previous = (child.start_byte, child.end_byte)
    return None


def _range_for(keyword: str, target: _Target, grammar: Grammar) -> tuple[int, int] | None:
    if keyword == "rest":
        block = next(
            (node for node in reversed(target.ancestors) if node.type in grammar.block_types),
            None,
        )
        if block is None:
            return None
        return target.prev_end, block.end_byte
    return target.prev_end, target.next_start


def _absorb_terminators(source: str, end: int) -> int:
    while end < len(source) and source[end] in _TERMINATORS:
        end += 1
    return end


def _first_error_point(root: Node) -> tuple[int, int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1, node.start_point[1]
        stack.extend(reversed(node.children))
    return root.start_point[0] + 1, root.start_point[1]
