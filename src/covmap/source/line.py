"""Physical line record of an indexed source file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class Line:
    """One physical line of source text.

    ``start`` and ``end`` are absolute offsets; ``end`` is exclusive and
    includes the line terminator, so consecutive lines are contiguous.
    ``content_end`` is the offset of the terminator (``end`` on the final
    line). ``ignored`` is only set while the owning index is built.
    """

    number: int  # 1-based
    start: int
    end: int
    content_end: int
    ignored: bool = False

    @classmethod
    def from_text(cls, number: int, start: int, text: str) -> Line:
        if text.endswith("\r\n"):
            terminator = 2
        elif text.endswith("\n"):
            terminator = 1
        else:
            terminator = 0
        end = start + len(text)
        return cls(number=number, start=start, end=end, content_end=end - terminator)

    @property
    def length(self) -> int:
        """Length without the line terminator."""
        return self.content_end - self.start

    def to_istanbul(self) -> dict[str, Any]:
        """Statement-map node spanning the whole line."""
        return {
            "start": {"line": self.number, "column": 0},
            "end": {"line": self.number, "column": self.length},
        }
