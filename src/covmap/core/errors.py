"""covmap error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Source / parse
- 4xxx: Source map
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    # Source (3xxx)
    SOURCE_SYNTAX_ERROR = 3001
    SOURCE_UNSUPPORTED_LANGUAGE = 3002

    # Source map (4xxx)
    SOURCE_MAP_DECODE_ERROR = 4001
    SOURCE_MAP_NOT_FOUND = 4002


@dataclass(frozen=True, slots=True)
class CovmapError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovmapError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class SourceParseError(CovmapError):
    """Source text could not be parsed for ignore-directive resolution."""

    @classmethod
    def syntax_error(cls, language: str, line: int, column: int) -> "SourceParseError":
        return cls(
            code=ErrorCode.SOURCE_SYNTAX_ERROR,
            message=f"Syntax error in {language} source at {line}:{column}",
            details={"language": language, "line": line, "column": column},
        )

    @classmethod
    def unsupported_language(cls, language: str) -> "SourceParseError":
        return cls(
            code=ErrorCode.SOURCE_UNSUPPORTED_LANGUAGE,
            message=f"Language not available: {language}",
            details={"language": language},
        )


class SourceMapError(CovmapError):
    """Source map payload could not be loaded."""

    @classmethod
    def decode_error(cls, reason: str) -> "SourceMapError":
        return cls(
            code=ErrorCode.SOURCE_MAP_DECODE_ERROR,
            message=f"Failed to decode source map: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "SourceMapError":
        return cls(
            code=ErrorCode.SOURCE_MAP_NOT_FOUND,
            message=f"Source map not found: {path}",
            details={"path": path},
        )
