"""Unfurl error types with typed error codes.

Error code ranges:
- 1xxx: Session
- 2xxx: Config
- 3xxx: Resolve
- 4xxx: Edit
- 5xxx: Save
- 9xxx: Internal

Only the 1xxx session errors escape ``unfurl()``. Everything else is
recoverable and is attached to the session as a diagnostic, a rejected
edit outcome or a failed save outcome.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Session (1xxx)
    EMPTY_ROOT_PATH = 1001
    ROOT_UNREADABLE = 1002
    SESSION_CANCELLED = 1003
    FLAT_INDEX_OUT_OF_RANGE = 1004

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Resolve (3xxx)
    CYCLE_DETECTED = 3001
    INCLUDE_UNREADABLE = 3002

    # Edit (4xxx)
    BOUNDARY_EDIT_REJECTED = 4001
    MULTILINE_EDIT_REJECTED = 4002

    # Save (5xxx)
    IO_ERROR = 5001
    LINE_OUT_OF_RANGE = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class UnfurlError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CYCLE_DETECTED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class SessionError(UnfurlError):
    """Errors that prevent a session from being created or used."""

    @classmethod
    def empty_root_path(cls) -> "SessionError":
        return cls(
            code=ErrorCode.EMPTY_ROOT_PATH,
            message="Root path is empty. Save the file before unfurling it.",
        )

    @classmethod
    def root_unreadable(cls, path: str, reason: str) -> "SessionError":
        return cls(
            code=ErrorCode.ROOT_UNREADABLE,
            message=f"Failed to read root file {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def cancelled(cls, path: str) -> "SessionError":
        return cls(
            code=ErrorCode.SESSION_CANCELLED,
            message=f"Unfurl of {path} was cancelled by a newer session",
            retryable=True,
            details={"path": path},
        )

    @classmethod
    def index_out_of_range(cls, index: int, size: int) -> "SessionError":
        return cls(
            code=ErrorCode.FLAT_INDEX_OUT_OF_RANGE,
            message=f"Flat line index {index} is outside the view (0..{size - 1})",
            details={"index": index, "size": size},
        )


class ConfigError(UnfurlError):
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


class ResolveError(UnfurlError):
    """Recoverable include-resolution failures, scoped to one include."""

    @classmethod
    def cycle(cls, path: str, included_from: str, line: int) -> "ResolveError":
        return cls(
            code=ErrorCode.CYCLE_DETECTED,
            message=f"Circular include detected: {path} (from {included_from}:{line})",
            details={"path": path, "included_from": included_from, "line": line},
        )

    @classmethod
    def unreadable(cls, path: str, included_from: str, line: int, reason: str) -> "ResolveError":
        return cls(
            code=ErrorCode.INCLUDE_UNREADABLE,
            message=f"Failed to include {path} (from {included_from}:{line}): {reason}",
            details={
                "path": path,
                "included_from": included_from,
                "line": line,
                "reason": reason,
            },
        )


class EditError(UnfurlError):
    """Per-edit rejections."""

    @classmethod
    def boundary(cls, index: int, path: str) -> "EditError":
        return cls(
            code=ErrorCode.BOUNDARY_EDIT_REJECTED,
            message=f"Line {index} is a read-only marker for {path}",
            details={"index": index, "path": path},
        )

    @classmethod
    def multiline(cls, index: int, path: str) -> "EditError":
        return cls(
            code=ErrorCode.MULTILINE_EDIT_REJECTED,
            message=f"Edit for line {index} contains a line break; one view line maps to one source line",
            details={"index": index, "path": path},
        )


class SaveError(UnfurlError):
    """Per-file persistence failures."""

    @classmethod
    def read_failed(cls, path: str, reason: str) -> "SaveError":
        return cls(
            code=ErrorCode.IO_ERROR,
            message=f"Failed to read {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason, "operation": "read"},
        )

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "SaveError":
        return cls(
            code=ErrorCode.IO_ERROR,
            message=f"Failed to write {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason, "operation": "write"},
        )

    @classmethod
    def line_out_of_range(cls, path: str, line: int, length: int) -> "SaveError":
        return cls(
            code=ErrorCode.LINE_OUT_OF_RANGE,
            message=f"Line {line} is past the end of {path} ({length} lines)",
            details={"path": path, "line": line, "length": length},
        )


class InternalError(UnfurlError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
