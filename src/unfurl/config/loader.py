"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (UNFURL__SECTION__KEY)
3. Project config (nearest <dir>/.unfurl/config.yaml above the root file)
4. Global config (~/.config/unfurl/config.yaml)
5. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from unfurl.config.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME, ENV_PREFIX
from unfurl.config.models import (
    ExportConfig,
    LoggingConfig,
    MarkerConfig,
    ResolveConfig,
    SaveConfig,
    UnfurlConfig,
)
from unfurl.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/unfurl/config.yaml").expanduser()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class UnfurlSettings(BaseSettings):
        """Root config. Env vars: UNFURL__LOGGING__LEVEL, UNFURL__SAVE__OVERFLOW, etc."""

        model_config = SettingsConfigDict(
            env_prefix=ENV_PREFIX,
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        markers: MarkerConfig = MarkerConfig()
        resolve: ResolveConfig = ResolveConfig()
        save: SaveConfig = SaveConfig()
        export: ExportConfig = ExportConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return UnfurlSettings


UnfurlSettings = _make_settings_class({})


def project_config_path(start: Path) -> Path:
    """Nearest ``.unfurl/config.yaml`` at or above the directory holding ``start``.

    Walks up the directory tree. When no ancestor has one, the path beside
    ``start`` is returned (it does not exist and loads as empty).
    """
    base = start if start.is_dir() else start.parent
    current = base.resolve()

    while current != current.parent:
        candidate = current / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        current = current.parent

    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(start: Path | None = None, **kwargs: Any) -> UnfurlConfig:
    """Load config: defaults < global yaml < project yaml < env vars < kwargs.

    Args:
        start: Root file or directory whose ``.unfurl/config.yaml`` applies.
               Defaults to the current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    start = start or Path.cwd()

    yaml_config = _load_yaml(GLOBAL_CONFIG_PATH)
    project_config = _load_yaml(project_config_path(start))
    if project_config:
        yaml_config = _deep_merge(yaml_config, project_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return UnfurlConfig.model_validate(settings.model_dump())
