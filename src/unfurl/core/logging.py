"""Structured logging with session correlation and multi-output support.

Supports:
- Console suppression during Rich live displays
- Separate console vs file log levels
- Session correlation IDs bound onto every event
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from unfurl.config.models import LoggingConfig

_session_id: ContextVar[str | None] = ContextVar("session_id", default=None)


def get_session_id() -> str | None:
    return _session_id.get()


def set_session_id(session_id: str | None = None) -> str:
    """Set or generate the session correlation ID."""
    sid = session_id or uuid4().hex[:12]
    _session_id.set(sid)
    return sid


def clear_session_id() -> None:
    _session_id.set(None)


def _add_session_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if sid := get_session_id():
        event_dict.setdefault("session_id", sid)
    return event_dict


_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class ConsoleSuppressingFilter(logging.Filter):
    """Gate for console handlers.

    User-facing output goes through the Rich console in progress.py, so
    structlog only reaches the terminal when console logs were requested
    (``unfurl -v``) and no live display is running. File handlers are
    never filtered.
    """

    def __init__(self, enabled: bool) -> None:
        super().__init__()
        self._enabled = enabled

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        # Import here to avoid circular dependency
        from unfurl.core.progress import is_console_suppressed

        if not self._enabled:
            return False
        return not is_console_suppressed()


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
    console: bool = True,
) -> None:
    """Configure structlog. Pass config for multi-output, or use simple params.

    Args:
        config: Logging configuration with outputs
        json_format: Use JSON format for simple setup
        level: Default log level
        console: Let log events reach stderr/stdout handlers
    """
    from unfurl.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    default_level = _LEVEL_MAP.get(config.level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_session_id,  # type: ignore[list-item]
    ]

    _configure_stdlib_logging(config, shared_processors, default_level, console)


def _create_handler(destination: str, *, is_console: bool, console_enabled: bool) -> logging.Handler:
    """Create handler for stderr, stdout, or file path."""
    handler: logging.Handler
    if destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    if is_console:
        handler.addFilter(ConsoleSuppressingFilter(console_enabled))

    return handler


def _configure_stdlib_logging(
    config: LoggingConfig,
    shared_processors: list[structlog.types.Processor],
    default_level: int,
    console_enabled: bool,
) -> None:
    """Configure logging via stdlib (proper file handle management)."""
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Don't cache - allows reconfiguration and respects level changes
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for old in root_logger.handlers:
        old.close()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)

    for output in config.outputs:
        output_level = _LEVEL_MAP.get((output.level or config.level).upper(), default_level)
        is_console = output.destination in ("stderr", "stdout")

        if output.format == "json":
            formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared_processors,
            )
        else:
            formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(
                    colors=is_console and sys.stderr.isatty(),
                    pad_event_to=0,
                    pad_level=False,
                ),
                foreign_pre_chain=shared_processors,
            )

        handler = _create_handler(
            output.destination, is_console=is_console, console_enabled=console_enabled
        )
        handler.setLevel(output_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
