"""Function-level coverage record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FunctionRecord:
    """One executable function's name, extent and execution count.

    Lines are 1-based, columns 0-based. ``absolute_start_col`` and
    ``absolute_end_col`` are offsets into the generated source. Fields are
    stored as given; consistency is the caller's concern.
    """

    name: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int | float
    count: int
    absolute_start_col: int
    absolute_end_col: int

    def to_istanbul(self) -> dict[str, Any]:
        """Istanbul ``fnMap`` entry; ``decl`` and ``loc`` share one span."""
        loc = {
            "start": {"line": self.start_line, "column": self.start_col},
            "end": {"line": self.end_line, "column": self.end_col},
        }
        return {
            "name": self.name,
            "decl": loc,
            "loc": loc,
            "line": self.start_line,
        }
