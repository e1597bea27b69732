"""Shared pytest fixtures for locale-tree backed tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from i18n_server.config import TranslationSettings
from i18n_server.locales.cache import TranslationCache
from i18n_server.locales.scanner import scan_locales_directory


def write_dictionary(root: Path, language: str, file_name: str, data: dict) -> Path:
    path = root / language / f"{file_name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


def read_dictionary(root: Path, language: str, file_name: str) -> dict:
    return json.loads((root / language / f"{file_name}.json").read_text(encoding="utf-8"))


@pytest.fixture
def locales_root(tmp_path: Path) -> Path:
    root = tmp_path / "locales"
    write_dictionary(root, "en", "common", {"greet": "Hello", "bye": "Goodbye"})
    write_dictionary(root, "zh", "common", {"greet": "你好", "thanks": "谢谢"})
    write_dictionary(root, "zh", "home", {"title": "首页"})
    return root


@pytest.fixture
def cache(locales_root: Path) -> TranslationCache:
    inventory = scan_locales_directory(locales_root)
    cache = TranslationCache(locales_root, inventory.languages, inventory.resource_files)
    cache.preload()
    return cache


@pytest.fixture
def translation_settings() -> TranslationSettings:
    return TranslationSettings(
        api_url="https://llm.example/v1/chat/completions",
        api_key="secret-key",
        request_delay_seconds=0,
    )


class FakeProvider:
    """Stands in for TranslationProviderClient; answers with language names as keys."""

    def __init__(self, *, fail: Exception | None = None, suffix: str = "") -> None:
        self.fail = fail
        self.suffix = suffix
        self.calls: list[tuple[list[str], list[str]]] = []

    async def translate(self, target_languages, source_texts):
        self.calls.append((list(target_languages), list(source_texts)))
        if self.fail is not None:
            raise self.fail
        text = source_texts[0]
        return {name: f"{text} [{name}]{self.suffix}" for name in target_languages}


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_dictionary():
    return write_dictionary


@pytest.fixture
def load_dictionary():
    return read_dictionary


@pytest.fixture
def failing_provider():
    def _build(error: Exception) -> FakeProvider:
        return FakeProvider(fail=error)

    return _build
