"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (MSGSCAN__SECTION__KEY)
3. YAML file (msgscan.yaml, or an explicit path)
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from msgscan.config.models import (
    ExtractorConfig,
    LocationConfig,
    LoggingConfig,
    MsgScanConfig,
)
from msgscan.core.errors import ConfigurationError

DEFAULT_CONFIG_NAME = "msgscan.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigurationError.parse_error(str(path), "top level must be a mapping")
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
    """Create a Settings class with instance-based YAML source."""

    class MsgScanSettings(BaseSettings):
        """Root config. Env vars: MSGSCAN__LOGGING__LEVEL, MSGSCAN__EXTRACTORS, etc."""

        model_config = SettingsConfigDict(
            env_prefix="MSGSCAN__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        extractors: list[ExtractorConfig] = []
        locations: list[LocationConfig] = []

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return MsgScanSettings


def load_config(
    path: Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
    **kwargs: Any,
) -> MsgScanConfig:
    """Load config: defaults < YAML file < env vars < kwargs.

    Args:
        path: YAML file to read. Defaults to msgscan.yaml in the working
              directory, which may be absent; an explicit path must exist.
        overrides: Nested values deep-merged over the YAML file.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigurationError: On invalid YAML syntax or validation errors.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigurationError.parse_error(str(path), "file not found")
        yaml_config = _load_yaml(path)
    else:
        yaml_config = _load_yaml(Path.cwd() / DEFAULT_CONFIG_NAME)

    if overrides:
        yaml_config = _deep_merge(yaml_config, overrides)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigurationError.invalid_value(field, err.get("input"), err["msg"]) from e
    return MsgScanConfig.model_validate(settings.model_dump())
