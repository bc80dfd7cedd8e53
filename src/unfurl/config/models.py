"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (UNFURL__SECTION__KEY)
3. Project YAML (<dir>/.unfurl/config.yaml)
4. Global YAML (~/.config/unfurl/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    UNFURL__<SECTION>__<KEY>=<VALUE>

Examples:
    UNFURL__LOGGING__LEVEL=DEBUG
    UNFURL__SAVE__OVERFLOW=error
    UNFURL__RESOLVE__MAX_DEPTH=16
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from unfurl.config.constants import DEFAULT_INCLUDE_PATTERN, MAX_DEPTH_LIMIT

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
OverflowPolicy = Literal["extend", "error"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

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
        UNFURL__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every include and edit.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class MarkerConfig(BaseModel):
    """Text of the synthetic read-only lines in the unfurled view.

    Placeholders: ``{path}`` is the canonical absolute path of the included
    file, ``{name}`` its basename. The defaults are C line comments so the
    view stays parseable by a language server.

    Env vars:
        UNFURL__MARKERS__START_TEMPLATE
        UNFURL__MARKERS__END_TEMPLATE
        UNFURL__MARKERS__FAILED_TEMPLATE
    """

    start_template: str = Field(
        default="// ---- start of {name} ({path}) ----",
        description="Line inserted before an included file's content.",
    )
    end_template: str = Field(
        default="// ---- end of {name} ----",
        description="Line inserted after an included file's content.",
    )
    failed_template: str = Field(
        default="// ---- failed to include {name} ({path}) ----",
        description="Line replacing an include that is cyclic or unreadable.",
    )

    @field_validator("start_template", "end_template", "failed_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        if "{path}" not in v and "{name}" not in v:
            raise ValueError("Marker template must contain {path} or {name}")
        try:
            v.format(path="", name="")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"Marker template is not a valid format string: {e}") from e
        if "\n" in v:
            raise ValueError("Marker template must be a single line")
        return v


class ResolveConfig(BaseModel):
    """Include resolution configuration.

    Env vars:
        UNFURL__RESOLVE__ENCODING: Text encoding for reads and writes
        UNFURL__RESOLVE__INCLUDE_PATTERN: Directive regex, one capture group
        UNFURL__RESOLVE__MAX_DEPTH: Include nesting limit
    """

    encoding: str = Field(
        default="utf-8",
        description="Encoding used to read and write source files.",
    )
    include_pattern: str = Field(
        default=DEFAULT_INCLUDE_PATTERN,
        description="Regex matched against each line. Group 1 is the included path. "
        "Only quoted includes are followed by default.",
    )
    max_depth: int = Field(
        default=64,
        description="Nesting limit. Deeper includes are reported as unreadable.",
    )

    @field_validator("include_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid include pattern: {e}") from e
        if compiled.groups < 1:
            raise ValueError("Include pattern must capture the included path in group 1")
        return v

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        if not (1 <= v <= MAX_DEPTH_LIMIT):
            raise ValueError(f"max_depth must be 1-{MAX_DEPTH_LIMIT}, got {v}")
        return v


class SaveConfig(BaseModel):
    """Persistence configuration.

    Env vars:
        UNFURL__SAVE__OVERFLOW: "extend" or "error"
        UNFURL__SAVE__PRESERVE_TRAILING_NEWLINE: Keep a file's final newline
    """

    overflow: OverflowPolicy = Field(
        default="extend",
        description="What to do when a patched line is past the end of the file on disk. "
        "extend pads the file with empty lines, error fails that file.",
    )
    preserve_trailing_newline: bool = Field(
        default=True,
        description="A file that ended with a newline still ends with one after saving.",
    )


class ExportConfig(BaseModel):
    """Export configuration.

    Env vars:
        UNFURL__EXPORT__PREFIX: Filename prefix of the exported view
    """

    prefix: str = Field(
        default="_unfurled_",
        description="Exported view is written beside the root as <prefix><root name>.",
    )

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Export prefix must be a non-empty filename fragment: {v!r}")
        return v


class UnfurlConfig(BaseModel):
    """Root configuration for unfurl."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    markers: MarkerConfig = Field(default_factory=MarkerConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)
    save: SaveConfig = Field(default_factory=SaveConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
