"""In-memory cache over per-language JSON dictionaries with a lazily rebuilt record view."""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from time import perf_counter
from typing import Any, Iterable, Mapping

from i18n_server.domain.models import CacheStatus, ResourceFileCreation, TranslationRecord
from i18n_server.locales.scanner import DICTIONARY_SUFFIX
from i18n_server.logging import logger
from i18n_server.services.exceptions import InvalidInput
from i18n_server.utils.datetime import utc_now

RESOURCE_FILE_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
JSON_INDENT = 4


def _display_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)


class TranslationCache:
    """Owns every (language, resource file) dictionary the server serves.

    Reads are answered from memory; the filesystem is consulted only for
    entries that were never loaded and when persisting a write. The flat
    list of :class:`TranslationRecord` is derived from the dictionaries and
    thrown away on every successful write, then rebuilt on the next read.
    """

    def __init__(
        self,
        locales_path: str | Path,
        languages: Iterable[str],
        resource_files: Iterable[str],
    ) -> None:
        self.locales_path = Path(locales_path)
        self._languages: list[str] = list(languages)
        self._resource_files: list[str] = list(resource_files)
        self._dictionaries: dict[tuple[str, str], dict[str, Any]] = {}
        self._aggregate: list[TranslationRecord] | None = None
        self.last_updated: datetime | None = None

    @property
    def languages(self) -> list[str]:
        return list(self._languages)

    @property
    def resource_files(self) -> list[str]:
        return list(self._resource_files)

    @property
    def aggregate_is_valid(self) -> bool:
        return self._aggregate is not None

    def has_resource_file(self, name: str) -> bool:
        return name in self._resource_files

    def dictionary_path(self, language: str, file_name: str) -> Path:
        return self.locales_path / language / f"{file_name}{DICTIONARY_SUFFIX}"

    def invalidate(self) -> None:
        self._aggregate = None

    def status(self) -> CacheStatus:
        return CacheStatus(cache_size=len(self._dictionaries), last_updated=self.last_updated)

    def preload(self) -> int:
        """Load every configured (language, file) pair; returns how many files existed."""

        started = perf_counter()
        loaded_files = 0
        self._dictionaries.clear()
        for language in self._languages:
            for file_name in self._resource_files:
                path = self.dictionary_path(language, file_name)
                data: dict[str, Any] = {}
                try:
                    if path.exists():
                        data = self._load_file(path)
                        loaded_files += 1
                except (OSError, ValueError) as exc:
                    logger.error("dictionary_load_failed", path=str(path), error=str(exc))
                    data = {}
                self._dictionaries[(language, file_name)] = data

        self.last_updated = utc_now()
        self.invalidate()
        logger.info(
            "translation_cache_preloaded",
            loaded_files=loaded_files,
            cached_entries=len(self._dictionaries),
            elapsed_ms=round((perf_counter() - started) * 1000, 2),
        )
        return loaded_files

    def read_dictionary(self, language: str, file_name: str) -> dict[str, Any]:
        """Return a copy of the dictionary; missing or corrupt data reads as ``{}``."""

        return dict(self._dictionary(language, file_name))

    def write_dictionary(self, language: str, file_name: str, data: Mapping[str, Any]) -> bool:
        path = self.dictionary_path(language, file_name)
        snapshot = dict(data)
        try:
            self._write_file(path, snapshot)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("dictionary_write_failed", path=str(path), error=str(exc))
            return False

        self._dictionaries[(language, file_name)] = snapshot
        self.invalidate()
        return True

    def build_aggregate(self) -> list[TranslationRecord]:
        if self._aggregate is not None:
            return self._aggregate

        started = perf_counter()
        records: list[TranslationRecord] = []
        next_id = 1
        for file_name in self._resource_files:
            dictionaries = [
                (language, self._dictionary(language, file_name)) for language in self._languages
            ]
            keys: dict[str, None] = {}
            for _, data in dictionaries:
                keys.update(dict.fromkeys(data))

            for key in keys:
                translations = {
                    language: _display_value(data.get(key)) for language, data in dictionaries
                }
                records.append(
                    TranslationRecord(id=next_id, key=key, file=file_name, translations=translations)
                )
                next_id += 1

        self._aggregate = records
        logger.info(
            "translation_aggregate_rebuilt",
            records=len(records),
            elapsed_ms=round((perf_counter() - started) * 1000, 2),
        )
        return records

    def update_translation(self, key: str, file_name: str, values: Mapping[str, str]) -> bool:
        """Write ``values`` per language; no rollback when a later language fails."""

        success = True
        for language, value in values.items():
            if language not in self._languages:
                continue
            data = self.read_dictionary(language, file_name)
            data[key] = value
            if not self.write_dictionary(language, file_name, data):
                success = False
        return success

    def delete_translation(self, key: str, file_name: str) -> bool:
        success = True
        for language in self._languages:
            data = self.read_dictionary(language, file_name)
            if key not in data:
                continue
            del data[key]
            if not self.write_dictionary(language, file_name, data):
                success = False
        return success

    def create_resource_file(self, name: str) -> ResourceFileCreation:
        if not RESOURCE_FILE_NAME_PATTERN.fullmatch(name or ""):
            raise InvalidInput(
                "File name can only contain letters, numbers, hyphens, and underscores"
            )

        outcome = ResourceFileCreation(name=name)
        if self.has_resource_file(name):
            outcome.already_exists = True
            return outcome

        for language in self._languages:
            path = self.dictionary_path(language, name)
            try:
                if path.exists():
                    logger.info("resource_file_exists", path=str(path))
                    continue
                self._write_file(path, {})
            except OSError as exc:
                logger.error("resource_file_create_failed", path=str(path), error=str(exc))
                outcome.errors.append(f"{language}: {exc}")
                continue
            self._dictionaries[(language, name)] = {}
            outcome.created_count += 1
            logger.info("resource_file_created", path=str(path))

        self._resource_files = sorted([*self._resource_files, name])
        self.invalidate()
        return outcome

    def refresh(self) -> CacheStatus:
        self.preload()
        self.invalidate()
        return self.status()

    def _dictionary(self, language: str, file_name: str) -> dict[str, Any]:
        cache_key = (language, file_name)
        cached = self._dictionaries.get(cache_key)
        if cached is not None:
            return cached

        path = self.dictionary_path(language, file_name)
        data: dict[str, Any] = {}
        try:
            if path.exists():
                data = self._load_file(path)
        except (OSError, ValueError) as exc:
            logger.error("dictionary_read_failed", path=str(path), error=str(exc))
            data = {}
        self._dictionaries[cache_key] = data
        return data

    @staticmethod
    def _load_file(path: Path) -> dict[str, Any]:
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        return payload

    @staticmethod
    def _write_file(path: Path, data: Mapping[str, Any]) -> None:
        text = json.dumps(data, ensure_ascii=False, indent=JSON_INDENT)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f".{path.name}.tmp")
        try:
            temp_path.write_text(text, encoding="utf-8")
            temp_path.replace(path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise


__all__ = ["RESOURCE_FILE_NAME_PATTERN", "TranslationCache"]
