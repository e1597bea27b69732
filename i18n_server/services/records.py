"""Record-level operations exposed to the HTTP layer."""

from __future__ import annotations

from typing import Iterator, Mapping

from i18n_server.domain.models import (
    CacheStatus,
    RecordFilter,
    ResourceFileCreation,
    TranslationRecord,
)
from i18n_server.locales.cache import TranslationCache
from i18n_server.services import archive
from i18n_server.services.exceptions import (
    DuplicateKey,
    InvalidInput,
    RecordNotFound,
    ResourceFileNotFound,
    StorageError,
)


class RecordService:
    def __init__(self, cache: TranslationCache, *, reference_language: str = "zh") -> None:
        self.cache = cache
        self.reference_language = reference_language

    def list_languages(self) -> list[str]:
        return self.cache.languages

    def list_resource_files(self) -> list[str]:
        return self.cache.resource_files

    def get_all_records(self, record_filter: RecordFilter | None = None) -> list[TranslationRecord]:
        records = self.cache.build_aggregate()
        if record_filter is None:
            return list(records)
        return [record for record in records if record_filter.matches(record)]

    def get_record(self, record_id: int) -> TranslationRecord:
        for record in self.cache.build_aggregate():
            if record.id == record_id:
                return record
        raise RecordNotFound("Translation not found")

    def find_record(self, file_name: str, key: str) -> TranslationRecord | None:
        matches = self.get_all_records(RecordFilter(file=file_name, key=key))
        return matches[0] if matches else None

    def create_record(self, key: str, file_name: str, translations: Mapping[str, str]) -> TranslationRecord:
        if not key or not file_name or translations is None:
            raise InvalidInput("Missing required fields")
        self._require_resource_file(file_name)

        if self.reference_language in self.cache.languages:
            existing = self.cache.read_dictionary(self.reference_language, file_name)
            if key in existing:
                raise DuplicateKey("Translation key already exists")

        if not self.cache.update_translation(key, file_name, translations):
            raise StorageError("Failed to save translation")

        record = self.find_record(file_name, key)
        if record is None:
            # Nothing was written: none of the submitted languages is configured.
            raise InvalidInput("No configured language in translations")
        return record

    def update_record(
        self,
        record_id: int,
        *,
        key: str | None = None,
        file_name: str | None = None,
        translations: Mapping[str, str] | None = None,
    ) -> TranslationRecord:
        """Rewrite a record; a key or file change deletes the old entry first.

        The rename is not atomic: if the second write fails the old entry is
        already gone.
        """

        record = self.get_record(record_id)
        final_key = key or record.key
        final_file = file_name or record.file
        if final_file != record.file:
            self._require_resource_file(final_file)

        if (final_key, final_file) != (record.key, record.file):
            if not self.cache.delete_translation(record.key, record.file):
                raise StorageError("Failed to update translation")

        final_translations = dict(translations) if translations is not None else dict(record.translations)
        if not self.cache.update_translation(final_key, final_file, final_translations):
            raise StorageError("Failed to update translation")
        updated = self.find_record(final_file, final_key)
        if updated is None:
            raise InvalidInput("No configured language in translations")
        return updated

    def delete_record(self, record_id: int) -> TranslationRecord:
        record = self.get_record(record_id)
        if not self.cache.delete_translation(record.key, record.file):
            raise StorageError("Failed to delete translation")
        return record

    def create_resource_file(self, name: str) -> ResourceFileCreation:
        if not name:
            raise InvalidInput("Please provide file name")
        return self.cache.create_resource_file(name)

    def refresh_cache(self) -> CacheStatus:
        return self.cache.refresh()

    def stream_archive(self) -> Iterator[bytes]:
        return archive.stream_locales_archive(self.cache.locales_path)

    def export_archive(self) -> bytes:
        return archive.build_locales_archive(self.cache.locales_path)

    def _require_resource_file(self, file_name: str) -> None:
        if not self.cache.has_resource_file(file_name):
            raise ResourceFileNotFound(f"Translation file {file_name} not found")


__all__ = ["RecordService"]
