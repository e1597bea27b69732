"""Settings resolution and precedence."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from i18n_server.config import DEFAULT_LANGUAGE_MAP, ServerSettings, TranslationSettings, load_settings
from i18n_server.services.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path: Path):
    for name in (
        "I18N_PORT",
        "I18N_HOST",
        "I18N_LOCALES_PATH",
        "I18N_TRANSLATION__MODEL",
        "I18N_TRANSLATION__API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = load_settings()

    assert settings.port == 3001
    assert settings.host == "localhost"
    assert settings.default_source_language == "zh"
    assert settings.duplicate_check_language == "zh"
    assert settings.translation.model == "qwen-plus"
    assert settings.translation.language_map == DEFAULT_LANGUAGE_MAP
    assert settings.translation.max_attempts == 1


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("I18N_PORT", "4000")
    monkeypatch.setenv("I18N_TRANSLATION__MODEL", "env-model")

    settings = load_settings()

    assert settings.port == 4000
    assert settings.translation.model == "env-model"


def test_file_overrides_environment_and_cli_overrides_file(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("I18N_PORT", "4000")
    monkeypatch.setenv("I18N_HOST", "env-host")
    monkeypatch.setenv("I18N_TRANSLATION__API_KEY", "from-env")
    config = tmp_path / "custom.yaml"
    config.write_text(
        "port: 5000\nhost: file-host\nlocales_path: data/locales\ntranslation:\n  model: file-model\n",
        encoding="utf-8",
    )

    settings = load_settings(config, port=6000, host=None)

    assert settings.port == 6000
    assert settings.host == "file-host"
    assert settings.locales_path == tmp_path / "data" / "locales"
    assert settings.translation.model == "file-model"
    assert settings.translation.api_key.get_secret_value() == "from-env"


def test_default_config_file_is_detected(tmp_path: Path):
    (tmp_path / "i18n.config.yaml").write_text("default_source_language: en\n", encoding="utf-8")

    assert load_settings().default_source_language == "en"


def test_missing_explicit_config_file_is_an_error(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.yaml")


@pytest.mark.parametrize("content", ["- just\n- a list\n", "port: [unclosed\n"])
def test_malformed_config_file_is_an_error(tmp_path: Path, content: str):
    config = tmp_path / "bad.yaml"
    config.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(config)


def test_empty_config_file_uses_defaults(tmp_path: Path):
    config = tmp_path / "empty.yaml"
    config.write_text("", encoding="utf-8")

    assert load_settings(config).port == 3001


def test_invalid_values_raise_config_error():
    with pytest.raises(ConfigError):
        load_settings(port=0)


def test_settings_are_immutable():
    settings = ServerSettings()

    with pytest.raises(ValidationError):
        settings.port = 1


def test_authorization_header_normalisation():
    assert TranslationSettings(api_key="abc").authorization_header() == "Bearer abc"
    assert TranslationSettings(api_key="Bearer abc").authorization_header() == "Bearer abc"
    assert TranslationSettings(api_key="  ").authorization_header() is None
