"""Core module exports."""

from unfurl.core.errors import (
    ConfigError,
    EditError,
    ErrorCode,
    InternalError,
    ResolveError,
    SaveError,
    SessionError,
    UnfurlError,
)
from unfurl.core.logging import (
    clear_session_id,
    configure_logging,
    get_logger,
    get_session_id,
    set_session_id,
)
from unfurl.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "EditError",
    "ErrorCode",
    "InternalError",
    "ResolveError",
    "SaveError",
    "SessionError",
    "UnfurlError",
    # Logging
    "clear_session_id",
    "configure_logging",
    "get_logger",
    "get_session_id",
    "set_session_id",
    # Progress
    "spinner",
    "status",
]
