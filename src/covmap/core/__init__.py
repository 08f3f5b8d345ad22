"""Core module exports."""

from covmap.core.errors import (
    ConfigError,
    CovmapError,
    ErrorCode,
    SourceMapError,
    SourceParseError,
)
from covmap.core.logging import (
    bind_source_file,
    clear_source_file,
    configure_logging,
    get_source_file,
)

__all__ = [
    # Errors
    "CovmapError",
    "ConfigError",
    "ErrorCode",
    "SourceMapError",
    "SourceParseError",
    # Logging
    "bind_source_file",
    "clear_source_file",
    "configure_logging",
    "get_source_file",
]
