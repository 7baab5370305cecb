"""Tests for styletokens.errors."""

from pathlib import Path

from styletokens.core.models import TokenValidationError
from styletokens.errors import (
    ERROR_MESSAGES,
    ErrorCode,
    StyleTokensError,
    TokenPipelineError,
    classify_exception,
    format_error_for_user,
)


def test_default_message_comes_from_code():
    error = StyleTokensError(ErrorCode.DICTIONARY_FROZEN)
    assert error.message == ERROR_MESSAGES[ErrorCode.DICTIONARY_FROZEN]
    assert str(error) == error.message


def test_str_includes_path_and_details():
    error = TokenPipelineError(
        ErrorCode.PIPELINE_FAILED,
        path=Path("tokens.yaml"),
        details={"step": "explode"},
    )
    text = str(error)
    assert "File: tokens.yaml" in text
    assert "step=explode" in text
    assert isinstance(error, StyleTokensError)


def test_to_dict():
    error = StyleTokensError(ErrorCode.CONFIG_MISSING, path=Path("a.yaml"))
    data = error.to_dict()
    assert data["code"] == "CONFIG_MISSING"
    assert data["path"] == "a.yaml"
    assert data["details"] == {}


def test_classify_exception_maps_known_errors():
    assert classify_exception(FileNotFoundError("no such file")).code is ErrorCode.DEFINITION_NOT_FOUND
    assert classify_exception(PermissionError("denied")).code is ErrorCode.OUTPUT_WRITE_FAILED
    assert classify_exception(RuntimeError("boom")).code is ErrorCode.PIPELINE_FAILED
    original = StyleTokensError(ErrorCode.CONFIG_INVALID)
    assert classify_exception(original) is original


def test_format_error_for_user_handles_generic_exceptions():
    text = format_error_for_user(RuntimeError("boom"))
    assert text.startswith("RuntimeError: boom")


def test_format_error_for_user_shows_suggestion_and_file():
    error = StyleTokensError(
        ErrorCode.OUTPUT_WRITE_FAILED,
        message="Could not write theme.css",
        path=Path("/tmp/out/theme.css"),
    )
    text = format_error_for_user(error)
    assert "Hint: " + ERROR_MESSAGES[ErrorCode.OUTPUT_WRITE_FAILED] in text
    assert "File: theme.css" in text


def test_classify_exception_maps_definition_validation_errors():
    error = classify_exception(TokenValidationError("tokens: unsupported keys found: gizmos"), Path("tokens.yaml"))

    assert error.code is ErrorCode.DEFINITION_INVALID
    assert error.message == "tokens: unsupported keys found: gizmos"
    assert error.suggestion == ERROR_MESSAGES[ErrorCode.DEFINITION_INVALID]
    assert error.path == Path("tokens.yaml")


def test_classify_exception_maps_other_os_errors_to_write_failures():
    assert classify_exception(IsADirectoryError("is a directory")).code is ErrorCode.OUTPUT_WRITE_FAILED
