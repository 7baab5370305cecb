"""Error codes and error handling utilities for styletokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for token builds."""

    # Definition errors
    DEFINITION_NOT_FOUND = auto()
    DEFINITION_INVALID = auto()

    # Dictionary errors
    DICTIONARY_FROZEN = auto()
    DICTIONARY_NOT_INDEXED = auto()
    PIPELINE_FAILED = auto()

    # Configuration errors
    CONFIG_INVALID = auto()
    CONFIG_MISSING = auto()

    # Output errors
    OUTPUT_WRITE_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.DEFINITION_NOT_FOUND: "The token definition file was not found.",
    ErrorCode.DEFINITION_INVALID: "The token definition file is invalid.",

    ErrorCode.DICTIONARY_FROZEN: "The token dictionary is frozen. Rebuild it to change tokens.",
    ErrorCode.DICTIONARY_NOT_INDEXED: "Token indexes are not built yet.",
    ErrorCode.PIPELINE_FAILED: "A token transform failed. The build was aborted.",

    ErrorCode.CONFIG_INVALID: "Configuration is invalid. Check the settings file.",
    ErrorCode.CONFIG_MISSING: "Configuration file not found.",

    ErrorCode.OUTPUT_WRITE_FAILED: "Cannot write the stylesheet. Check folder permissions.",
}


@dataclass
class StyleTokensError(Exception):
    """Base exception for styletokens with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or CLI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class TokenDictionaryError(StyleTokensError):
    """Raised when a token dictionary is used outside its lifecycle."""


class TokenPipelineError(StyleTokensError):
    """Raised when a transform step fails while building a dictionary."""


def classify_exception(exc: Exception, path: Path | None = None) -> StyleTokensError:
    """Classify a generic exception into a StyleTokensError with appropriate code."""
    if isinstance(exc, StyleTokensError):
        return exc
    exc_name = type(exc).__name__
    exc_str = str(exc).lower()

    if exc_name == "TokenValidationError":
        return StyleTokensError(ErrorCode.DEFINITION_INVALID, message=str(exc), path=path)
    if isinstance(exc, FileNotFoundError) or "no such file" in exc_str:
        return StyleTokensError(ErrorCode.DEFINITION_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, OSError) or "permission denied" in exc_str:
        return StyleTokensError(ErrorCode.OUTPUT_WRITE_FAILED, path=path, details={"original": exc_str})
    if "YAMLError" in exc_name or "scanner" in exc_str:
        return StyleTokensError(ErrorCode.CONFIG_INVALID, path=path, details={"original": exc_str})

    return StyleTokensError(
        ErrorCode.PIPELINE_FAILED,
        message=f"{exc_name}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: StyleTokensError | Exception) -> str:
    """Format an error for terminal display with actionable suggestions."""
    if isinstance(error, StyleTokensError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\nHint: {error.suggestion}")
        if error.path:
            parts.append(f"\n\nFile: {error.path.name}")
        if error.details:
            details_str = " | ".join(f"{k}={v}" for k, v in error.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
