"""Decoded source map with directional (biased) position lookups.

Decoding of the Source Map v3 ``mappings`` field is delegated to the
``sourcemap`` distribution; this module keeps the decoded points sorted two
ways (generated order and original order) and answers the two queries the
position mapper needs:

- ``original_position_for``: generated line/column -> original position.
  Only a mapping on the *same* generated line is accepted.
- ``generated_position_for``: original source/line/column -> generated
  position. Only a mapping from the *same* source is accepted.

Lines are 1-based, columns 0-based, on both sides.
"""

from __future__ import annotations

import bisect
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import sourcemap

from covmap.core.errors import SourceMapError


class Bias(Enum):
    """Search direction when a point has no exact mapping."""

    GREATEST_LOWER_BOUND = "greatest_lower_bound"  # nearest mapping at or before
    LEAST_UPPER_BOUND = "least_upper_bound"  # nearest mapping at or after


@dataclass(frozen=True, slots=True)
class OriginalPosition:
    source: str | None = None
    line: int | None = None
    column: int | float | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class GeneratedPosition:
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True, slots=True)
class SourceMapping:
    """One decoded point correspondence."""

    generated_line: int
    generated_column: int
    source: str | None = None
    original_line: int | None = None
    original_column: int | None = None
    name: str | None = None


class SourceMapLookup(Protocol):
    """What the position mapper needs from a source map."""

    def original_position_for(
        self, line: int, column: int, bias: Bias = Bias.GREATEST_LOWER_BOUND
    ) -> OriginalPosition: ...

    def generated_position_for(
        self, source: str, line: int, column: int, bias: Bias = Bias.GREATEST_LOWER_BOUND
    ) -> GeneratedPosition: ...


_UNMAPPED = OriginalPosition()
_NOT_GENERATED = GeneratedPosition()


class DecodedSourceMap:
    """In-memory source map answering biased lookups with binary search."""

    def __init__(self, mappings: Iterable[SourceMapping]) -> None:
        items = list(mappings)
        self._generated = sorted(
            items,
            key=lambda m: (
                m.generated_line,
                m.generated_column,
                m.source or "",
                m.original_line or 0,
                m.original_column or 0,
            ),
        )
        self._generated_keys = [(m.generated_line, m.generated_column) for m in self._generated]
        self._original = sorted(
            (m for m in items if m.source is not None),
            key=lambda m: (
                m.source,
                m.original_line,
                m.original_column,
                m.generated_line,
                m.generated_column,
            ),
        )
        self._original_keys = [
            (m.source, m.original_line, m.original_column) for m in self._original
        ]

    @classmethod
    def from_json(cls, payload: str | bytes | Mapping[str, Any]) -> DecodedSourceMap:
        """Decode a Source Map v3 document."""
        if isinstance(payload, Mapping):
            document = dict(payload)
        else:
            if isinstance(payload, bytes):
                payload = payload.decode("utf-8")
            try:
                document = json.loads(_strip_xssi_prefix(payload))
            except ValueError as e:
                raise SourceMapError.decode_error(str(e)) from e
        if not isinstance(document, dict):
            raise SourceMapError.decode_error("source map must be a JSON object")
        document.setdefault("names", [])
        try:
            index = sourcemap.loads(json.dumps(document))
        except (ValueError, KeyError, IndexError, AssertionError) as e:
            raise SourceMapError.decode_error(str(e) or type(e).__name__) from e
        return cls(
            SourceMapping(
                generated_line=token.dst_line + 1,
                generated_column=token.dst_col,
                source=token.src,
                original_line=token.src_line + 1 if token.src is not None else None,
                original_column=token.src_col if token.src is not None else None,
                name=token.name,
            )
            for token in index
        )

    @classmethod
    def from_file(cls, path: Path) -> DecodedSourceMap:
        if not path.is_file():
            raise SourceMapError.file_not_found(str(path))
        return cls.from_json(path.read_text(encoding="utf-8"))

    def __len__(self) -> int:
        return len(self._generated)

    @property
    def sources(self) -> list[str]:
        return sorted({m.source for m in self._original if m.source is not None})

    def original_position_for(
        self, line: int, column: int, bias: Bias = Bias.GREATEST_LOWER_BOUND
    ) -> OriginalPosition:
        idx = _search(self._generated_keys, (line, column), bias)
        if idx is None:
            return _UNMAPPED
        mapping = self._generated[idx]
        if mapping.generated_line != line or mapping.source is None:
            return _UNMAPPED
        return OriginalPosition(
            source=mapping.source,
            line=mapping.original_line,
            column=mapping.original_column,
            name=mapping.name,
        )

    def generated_position_for(
        self, source: str, line: int, column: int, bias: Bias = Bias.GREATEST_LOWER_BOUND
    ) -> GeneratedPosition:
        idx = _search(self._original_keys, (source, line, column), bias)
        if idx is None:
            return _NOT_GENERATED
        mapping = self._original[idx]
        if mapping.source != source:
            return _NOT_GENERATED
        return GeneratedPosition(line=mapping.generated_line, column=mapping.generated_column)


def _search(keys: list[Any], needle: Any, bias: Bias) -> int | None:
    """Index of the first entry equal to the bias-selected key, or None."""
    if bias is Bias.GREATEST_LOWER_BOUND:
        idx = bisect.bisect_right(keys, needle) - 1
        if idx < 0:
            return None
        return bisect.bisect_left(keys, keys[idx])
    idx = bisect.bisect_left(keys, needle)
    if idx >= len(keys):
        return None
    return idx


def _strip_xssi_prefix(text: str) -> str:
    if text.startswith(")]}"):
        return text.split("\n", 1)[1] if "\n" in text else ""
    return text
