"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVMAP__SECTION__KEY)
3. Project YAML (./.covmap.yaml, or an explicit path)
4. Global YAML (~/.config/covmap/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVMAP__<SECTION>__<KEY>=<VALUE>

Examples:
    COVMAP__LOGGING__LEVEL=DEBUG
    COVMAP__PARSER__ENABLED=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from covmap.source.grammars import GRAMMARS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVMAP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every resolved ignore segment.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


def _default_extensions() -> dict[str, str]:
    return {
        ".js": "javascript",
        ".mjs": "javascript",
        ".cjs": "javascript",
        ".jsx": "javascript",
        ".ts": "typescript",
        ".mts": "typescript",
        ".cts": "typescript",
        ".tsx": "tsx",
    }


class ParserConfig(BaseModel):
    """Syntax-tree ignore-directive resolution.

    Env vars:
        COVMAP__PARSER__ENABLED: Resolve ``t8 ignore`` directives (default: true)
    """

    enabled: bool = Field(
        default=True,
        description="Parse sources to resolve range-style ignore directives. "
        "When false only line-level directives apply.",
    )
    extensions: dict[str, str] = Field(
        default_factory=_default_extensions,
        description="File extension -> grammar name. Files with other extensions "
        "skip syntax-tree resolution.",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: dict[str, str]) -> dict[str, str]:
        normalized: dict[str, str] = {}
        for ext, grammar in v.items():
            if grammar not in GRAMMARS:
                raise ValueError(f"Unknown grammar {grammar!r} for {ext!r}")
            key = ext.lower()
            normalized[key if key.startswith(".") else f".{key}"] = grammar
        return normalized

    def parser_for(self, path: Path) -> str | None:
        """Grammar name for ``path``, or None when resolution is skipped."""
        if not self.enabled:
            return None
        return self.extensions.get(path.suffix.lower())


class CovmapConfig(BaseModel):
    """Root configuration for covmap.

    All settings can be configured via:
    1. Environment variables: COVMAP__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
