"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error mapping
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from covmap.config.loader import PROJECT_CONFIG_NAME, _deep_merge, _load_yaml, load_config
from covmap.config.models import LoggingConfig
from covmap.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No global config, no stray env vars, cwd in tmp."""
    monkeypatch.setattr("covmap.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global.yaml")
    for key in list(os.environ):
        if key.upper().startswith("COVMAP__"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("logging:\n  level: DEBUG\n")

        assert _load_yaml(yaml_file) == {"logging": {"level": "DEBUG"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """Top-level lists are rejected."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)

        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"logging": {"level": "INFO", "outputs": []}}
        override = {"logging": {"level": "DEBUG"}}

        assert _deep_merge(base, override) == {"logging": {"level": "DEBUG", "outputs": []}}

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict override replaces dict base."""
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}

        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        """Base dict is not mutated."""
        base = {"a": 1}
        _deep_merge(base, {"b": 2})

        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_defaults_when_no_files(self) -> None:
        """Defaults apply when no config files exist."""
        config = load_config()

        assert config.logging.level == "INFO"
        assert config.parser.enabled is True
        assert config.parser.extensions[".ts"] == "typescript"

    def test_loads_project_config_from_cwd(self, tmp_path: Path) -> None:
        """Picks up .covmap.yaml from the working directory."""
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: DEBUG\n")

        assert load_config().logging.level == "DEBUG"

    def test_loads_explicit_config_path(self, tmp_path: Path) -> None:
        """Explicit path wins over the working-directory file."""
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: DEBUG\n")
        explicit = tmp_path / "other.yaml"
        explicit.write_text("parser:\n  enabled: false\n")

        config = load_config(explicit)

        assert config.parser.enabled is False
        assert config.logging.level == "INFO"

    def test_project_config_overrides_global(self, tmp_path: Path) -> None:
        """Project YAML is merged over global YAML."""
        (tmp_path / "global.yaml").write_text("logging:\n  level: ERROR\nparser:\n  enabled: false\n")
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: DEBUG\n")

        config = load_config()

        assert config.logging.level == "DEBUG"
        assert config.parser.enabled is False

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        """Environment variables override YAML config."""
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: INFO\n")

        with patch.dict(os.environ, {"COVMAP__LOGGING__LEVEL": "WARNING"}):
            config = load_config()

        assert config.logging.level == "WARNING"

    def test_kwargs_override_all(self) -> None:
        """Keyword arguments override everything."""
        with patch.dict(os.environ, {"COVMAP__LOGGING__LEVEL": "WARNING"}):
            config = load_config(logging=LoggingConfig(level="ERROR"))

        assert config.logging.level == "ERROR"

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        """An explicit path that does not exist is an error."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.yaml")

        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        """Validation errors surface as ConfigError."""
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: LOUD\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert exc_info.value.details["field"].startswith("logging")

    def test_unknown_grammar_is_invalid(self, tmp_path: Path) -> None:
        """Extension mappings must name a registered grammar."""
        (tmp_path / PROJECT_CONFIG_NAME).write_text("parser:\n  extensions:\n    .coffee: coffee\n")

        with pytest.raises(ConfigError):
            load_config()
