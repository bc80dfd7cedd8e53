"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- project_config_path() function
- load_config() precedence: defaults < global < project < env < kwargs
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from unfurl.config.loader import (
    GLOBAL_CONFIG_PATH,
    _deep_merge,
    _load_yaml,
    load_config,
    project_config_path,
)
from unfurl.config.models import SaveConfig
from unfurl.core.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.upper().startswith("UNFURL__"):
            monkeypatch.delenv(key)


def _project_yaml(root: Path, text: str) -> None:
    config_dir = root / ".unfurl"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.yaml").write_text(text)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("save:\n  overflow: error\n")

        assert _load_yaml(yaml_file) == {"save": {"overflow": "error"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("markers:\n  start_template:\n    - [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        base = {"save": {"overflow": "extend", "preserve_trailing_newline": True}}
        override = {"save": {"overflow": "error"}}
        assert _deep_merge(base, override) == {
            "save": {"overflow": "error", "preserve_trailing_newline": True}
        }

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}
        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestProjectConfigPath:
    def test_file_uses_parent_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "main.c"
        root.write_text("")
        assert project_config_path(root) == tmp_path / ".unfurl" / "config.yaml"

    def test_directory_used_directly(self, tmp_path: Path) -> None:
        assert project_config_path(tmp_path) == tmp_path / ".unfurl" / "config.yaml"

    def test_found_in_ancestor_directory(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "save:\n  overflow: error\n")
        nested = tmp_path / "src" / "drivers"
        nested.mkdir(parents=True)
        root = nested / "uart.c"
        root.write_text("")

        assert project_config_path(root) == (tmp_path / ".unfurl" / "config.yaml").resolve()

    def test_nearest_ancestor_wins(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "export:\n  prefix: outer_\n")
        inner = tmp_path / "lib"
        inner.mkdir()
        _project_yaml(inner, "export:\n  prefix: inner_\n")

        assert project_config_path(inner / "x.c") == (inner / ".unfurl" / "config.yaml").resolve()

    def test_load_config_from_nested_root(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "save:\n  overflow: error\n")
        nested = tmp_path / "src"
        nested.mkdir()
        root = nested / "main.c"
        root.write_text("int x;\n")

        with patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(root)

        assert config.save.overflow == "error"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        with patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)

        assert config.logging.level == "INFO"
        assert config.save.overflow == "extend"
        assert config.export.prefix == "_unfurled_"

    def test_loads_project_config_beside_root_file(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "save:\n  overflow: error\n")
        root = tmp_path / "main.c"
        root.write_text("int x;\n")

        with patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(root)

        assert config.save.overflow == "error"

    def test_project_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("export:\n  prefix: g_\nresolve:\n  max_depth: 8\n")
        _project_yaml(tmp_path, "export:\n  prefix: p_\n")

        with patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.export.prefix == "p_"
        assert config.resolve.max_depth == 8

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "logging:\n  level: INFO\n")

        with (
            patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"UNFURL__LOGGING__LEVEL": "WARNING"}),
        ):
            config = load_config(tmp_path)

        assert config.logging.level == "WARNING"

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "save:\n  overflow: extend\n")

        with patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, save=SaveConfig(overflow="error"))

        assert config.save.overflow == "error"

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "save:\n  overflow: pad\n")

        with (
            patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError),
        ):
            load_config(tmp_path)

    def test_raises_config_error_for_bad_template(self, tmp_path: Path) -> None:
        _project_yaml(tmp_path, "markers:\n  end_template: '// end'\n")

        with (
            patch("unfurl.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError),
        ):
            load_config(tmp_path)


class TestGlobalConfigPath:
    def test_is_in_user_config(self) -> None:
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "unfurl" in str(GLOBAL_CONFIG_PATH)
