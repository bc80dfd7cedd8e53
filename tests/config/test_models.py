"""Tests for config/models.py validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from unfurl.config.models import (
    ExportConfig,
    LogOutputConfig,
    MarkerConfig,
    ResolveConfig,
    SaveConfig,
    UnfurlConfig,
)


class TestLogOutputConfig:
    def test_console_destinations(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"

    def test_relative_file_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/unfurl.log")


class TestMarkerConfig:
    def test_defaults_are_c_comments(self) -> None:
        markers = MarkerConfig()
        for template in (markers.start_template, markers.end_template, markers.failed_template):
            assert template.startswith("//")

    def test_template_requires_placeholder(self) -> None:
        with pytest.raises(ValidationError):
            MarkerConfig(start_template="// begin")

    def test_template_rejects_unknown_placeholder(self) -> None:
        with pytest.raises(ValidationError):
            MarkerConfig(start_template="// {name} {size}")

    def test_template_must_be_single_line(self) -> None:
        with pytest.raises(ValidationError):
            MarkerConfig(end_template="// {name}\n// more")


class TestResolveConfig:
    def test_default_pattern_only_matches_quoted(self) -> None:
        import re

        pattern = re.compile(ResolveConfig().include_pattern)
        assert pattern.search('#include "b.h"').group(1) == "b.h"
        assert pattern.search("#include <stdio.h>") is None

    def test_pattern_must_compile(self) -> None:
        with pytest.raises(ValidationError):
            ResolveConfig(include_pattern="#include (")

    def test_pattern_needs_capture_group(self) -> None:
        with pytest.raises(ValidationError):
            ResolveConfig(include_pattern=r'#include\s+"[^"]+"')

    @pytest.mark.parametrize("depth", [0, -1, 100_000])
    def test_max_depth_bounds(self, depth: int) -> None:
        with pytest.raises(ValidationError):
            ResolveConfig(max_depth=depth)


class TestSaveAndExportConfig:
    def test_overflow_choices(self) -> None:
        assert SaveConfig(overflow="error").overflow == "error"
        with pytest.raises(ValidationError):
            SaveConfig(overflow="truncate")  # type: ignore[arg-type]

    @pytest.mark.parametrize("prefix", ["", "a/b", "a\\b"])
    def test_export_prefix_must_be_filename_fragment(self, prefix: str) -> None:
        with pytest.raises(ValidationError):
            ExportConfig(prefix=prefix)


class TestUnfurlConfig:
    def test_all_sections_present(self) -> None:
        config = UnfurlConfig()
        assert config.logging.level == "INFO"
        assert config.resolve.encoding == "utf-8"
        assert config.save.preserve_trailing_newline is True
