"""Runtime configuration resolved from CLI flags, a YAML file and the environment."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, HttpUrl, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from i18n_server.services.exceptions import ConfigError

DEFAULT_CONFIG_FILENAME = "i18n.config.yaml"
PATH_FIELDS = ("locales_path", "static_path")

DEFAULT_LANGUAGE_MAP: dict[str, str] = {
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "id": "Indonesian",
    "ja": "Japanese",
    "ko": "Korean",
    "ms": "Malay",
    "pt": "Portuguese",
    "ru": "Russian",
    "th": "Thai",
    "vi": "Vietnamese",
    "zh": "Chinese",
    "zh-TW": "Chinese (Traditional)",
}


class TranslationSettings(BaseModel):
    api_url: HttpUrl | None = None
    api_key: SecretStr | None = None
    prompt: str | None = Field(
        default=None,
        description="System prompt override; the built-in prompt is used when empty.",
    )
    model: str = "qwen-plus"
    language_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_LANGUAGE_MAP))
    request_delay_seconds: float = Field(default=1.0, ge=0)
    request_timeout_seconds: int = Field(default=60, ge=5, le=600)
    max_attempts: int = Field(default=1, ge=1, le=5)

    @field_validator("api_url", "api_key", "prompt", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def authorization_header(self) -> str | None:
        if self.api_key is None:
            return None
        value = self.api_key.get_secret_value().strip()
        if value.lower().startswith("bearer "):
            return value
        return f"Bearer {value}"


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="I18N_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    host: str = "localhost"
    port: int = Field(default=3001, ge=1, le=65535)
    locales_path: Path = Path("public/locales")
    static_path: Path = Path("public")
    auto_open_browser: bool = True
    default_source_language: str = "zh"
    reference_language: str | None = None

    translation: TranslationSettings = Field(default_factory=TranslationSettings)

    @property
    def duplicate_check_language(self) -> str:
        return self.reference_language or self.default_source_language


def read_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from ``path``; an empty document yields ``{}``."""

    try:
        with path.open("r", encoding="utf-8") as stream:
            loaded = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file '{path}': {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read configuration file '{path}': {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Configuration file '{path}' must contain a YAML mapping.")
    return loaded


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config_path(config_file: str | Path | None, *, cwd: Path | None = None) -> Path | None:
    if config_file is not None:
        path = Path(config_file)
        if not path.is_absolute():
            path = (cwd or Path.cwd()) / path
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    default_path = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    return default_path if default_path.exists() else None


def load_settings(config_file: str | Path | None = None, **overrides: Any) -> ServerSettings:
    """Resolve settings once: overrides > config file > environment > defaults.

    ``None`` overrides are ignored so CLI flags that were not passed do not
    mask values coming from the file or the environment.
    """

    file_values: dict[str, Any] = {}
    config_path = resolve_config_path(config_file)
    if config_path is not None:
        file_values = read_config_file(config_path)
        # Paths in the file are relative to the file, not to the working directory.
        for field_name in PATH_FIELDS:
            raw = file_values.get(field_name)
            if isinstance(raw, str) and not Path(raw).is_absolute():
                file_values[field_name] = config_path.parent / raw

    explicit = {key: value for key, value in overrides.items() if value is not None}
    values = _deep_merge(file_values, explicit)
    try:
        return ServerSettings(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_LANGUAGE_MAP",
    "ServerSettings",
    "TranslationSettings",
    "load_settings",
    "read_config_file",
    "resolve_config_path",
]
