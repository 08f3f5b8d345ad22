"""Tests for error types and codes."""

import pytest

from covmap.core.errors import (
    ConfigError,
    CovmapError,
    ErrorCode,
    SourceMapError,
    SourceParseError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.SOURCE_SYNTAX_ERROR, 3000),
            (ErrorCode.SOURCE_UNSUPPORTED_LANGUAGE, 3000),
            (ErrorCode.SOURCE_MAP_DECODE_ERROR, 4000),
            (ErrorCode.SOURCE_MAP_NOT_FOUND, 4000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestCovmapError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = CovmapError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        error = CovmapError(code=ErrorCode.SOURCE_SYNTAX_ERROR, message="Something broke")

        assert str(error) == "[3001] SOURCE_SYNTAX_ERROR: Something broke"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are real exceptions."""
        with pytest.raises(CovmapError):
            raise SourceMapError.decode_error("bad")


class TestFactories:
    """Factory classmethods fill code and details."""

    def test_config_parse_error(self) -> None:
        error = ConfigError.parse_error("/x.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/x.yaml", "reason": "bad indent"}
        assert "/x.yaml" in error.message

    def test_config_invalid_value(self) -> None:
        error = ConfigError.invalid_value("parser.enabled", 3, "not a bool")

        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "3"

    def test_config_file_not_found(self) -> None:
        assert ConfigError.file_not_found("/nope").code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_source_syntax_error(self) -> None:
        error = SourceParseError.syntax_error("javascript", 4, 2)

        assert error.code == ErrorCode.SOURCE_SYNTAX_ERROR
        assert error.details == {"language": "javascript", "line": 4, "column": 2}
        assert "4:2" in error.message

    def test_source_unsupported_language(self) -> None:
        error = SourceParseError.unsupported_language("cobol")

        assert error.code == ErrorCode.SOURCE_UNSUPPORTED_LANGUAGE
        assert isinstance(error, CovmapError)

    def test_source_map_errors(self) -> None:
        assert SourceMapError.decode_error("x").code == ErrorCode.SOURCE_MAP_DECODE_ERROR
        assert SourceMapError.file_not_found("/a.map").details == {"path": "/a.map"}
