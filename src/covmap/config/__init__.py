"""Config module exports."""

from covmap.config.loader import load_config
from covmap.config.models import (
    CovmapConfig,
    LoggingConfig,
    LogOutputConfig,
    ParserConfig,
)

__all__ = [
    "load_config",
    "CovmapConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ParserConfig",
]
