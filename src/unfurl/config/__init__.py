"""Config module exports."""

from unfurl.config.loader import UnfurlSettings, load_config
from unfurl.config.models import (
    ExportConfig,
    LoggingConfig,
    MarkerConfig,
    ResolveConfig,
    SaveConfig,
    UnfurlConfig,
)

__all__ = [
    "load_config",
    "UnfurlConfig",
    "UnfurlSettings",
    "ExportConfig",
    "LoggingConfig",
    "MarkerConfig",
    "ResolveConfig",
    "SaveConfig",
]
