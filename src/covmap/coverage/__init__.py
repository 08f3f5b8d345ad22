"""Coverage report value objects."""

from covmap.coverage.function import FunctionRecord

__all__ = ["FunctionRecord"]
