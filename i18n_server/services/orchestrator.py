"""Fan a source string out to many target languages and merge results into the cache."""

from __future__ import annotations

import asyncio
from typing import Iterable, Mapping, Sequence

from i18n_server.config import TranslationSettings
from i18n_server.domain.models import (
    BatchItemResult,
    BatchTranslationOutcome,
    TranslationOutcome,
    TranslationRecord,
)
from i18n_server.locales.cache import TranslationCache
from i18n_server.logging import logger
from i18n_server.services.exceptions import InvalidInput, ProviderError, RecordNotFound, StorageError
from i18n_server.services.provider import TranslationProviderClient


class TranslationOrchestrator:
    def __init__(
        self,
        cache: TranslationCache,
        provider: TranslationProviderClient,
        settings: TranslationSettings | None = None,
        *,
        default_source_language: str = "zh",
    ) -> None:
        self.cache = cache
        self.provider = provider
        self.settings = settings or TranslationSettings()
        self.default_source_language = default_source_language

    @property
    def language_map(self) -> Mapping[str, str]:
        return self.settings.language_map

    def resolve_source(self, source_language: str | None) -> str:
        return source_language or self.default_source_language

    def resolve_targets(
        self, source_language: str, target_languages: Iterable[str] | None = None
    ) -> list[str]:
        if target_languages:
            return list(target_languages)
        return [language for language in self.cache.languages if language != source_language]

    async def translate_multiple(
        self,
        source_text: str,
        source_language: str,
        target_languages: Sequence[str],
        delay: float | None = None,
    ) -> TranslationOutcome:
        """Translate ``source_text`` into every known target language with one provider call.

        Unknown codes are reported and skipped. A provider failure yields an
        empty result set plus one error for the whole batch. The configured
        delay is always awaited before returning, even when nothing was sent.
        """

        outcome = TranslationOutcome()
        requested: dict[str, str] = {}
        for code in target_languages:
            name = self.language_map.get(code)
            if not name:
                logger.warning("unknown_language_code", code=code)
                outcome.errors.append(f"Unknown language code: {code}")
                continue
            requested[code] = name

        if not target_languages:
            outcome.errors.append("No target languages to translate")

        if requested:
            try:
                raw = await self.provider.translate(list(requested.values()), [source_text])
            except ProviderError as exc:
                targets = ", ".join(requested)
                logger.error(
                    "translation_failed",
                    source_language=source_language,
                    targets=list(requested),
                    error=str(exc),
                )
                outcome.errors.append(f"Failed to translate to {targets}: {exc}")
            else:
                outcome.results = self._normalize_results(raw, requested)
                if not outcome.results:
                    outcome.errors.append(
                        f"Translation provider returned no usable results for {', '.join(requested)}"
                    )

        pause = self.settings.request_delay_seconds if delay is None else delay
        if pause > 0:
            await asyncio.sleep(pause)
        return outcome

    async def translate_only(
        self,
        text: str,
        source_language: str | None = None,
        target_languages: Sequence[str] | None = None,
    ) -> TranslationOutcome:
        if not text:
            raise InvalidInput("Please provide text to translate")
        source = self.resolve_source(source_language)
        return await self.translate_multiple(text, source, self.resolve_targets(source, target_languages))

    async def auto_translate(
        self,
        record_id: int,
        source_language: str | None = None,
        target_languages: Sequence[str] | None = None,
    ) -> TranslationOutcome:
        record = self._find_record(record_id)
        if record is None:
            raise RecordNotFound("Translation not found")

        source = self.resolve_source(source_language)
        source_text = record.translations.get(source)
        if not source_text:
            raise InvalidInput(f"Source language {source} translation not found")

        outcome = await self.translate_multiple(
            source_text, source, self.resolve_targets(source, target_languages)
        )
        if not self.cache.update_translation(record.key, record.file, outcome.results):
            raise StorageError("Failed to save translations")
        return outcome

    async def batch_translate(
        self,
        record_ids: Sequence[int],
        source_language: str | None = None,
        target_languages: Sequence[str] | None = None,
    ) -> BatchTranslationOutcome:
        """Translate each record independently; one bad id never stops the batch.

        Ids are resolved against the record view as it was when the batch
        started, so writes made by earlier items do not renumber later ones.
        """

        if not record_ids:
            raise InvalidInput("Please provide IDs to translate")

        source = self.resolve_source(source_language)
        targets = self.resolve_targets(source, target_languages)
        snapshot = {record.id: record for record in self.cache.build_aggregate()}
        batch = BatchTranslationOutcome()

        for record_id in record_ids:
            record = snapshot.get(record_id)
            if record is None:
                batch.errors.append(f"Translation with ID {record_id} not found")
                continue

            source_text = record.translations.get(source)
            if not source_text:
                batch.errors.append(f"Source language {source} for ID {record_id} not found")
                continue

            outcome = await self.translate_multiple(source_text, source, targets)
            batch.errors.extend(outcome.errors)
            if not outcome.results:
                continue

            if self.cache.update_translation(record.key, record.file, outcome.results):
                batch.successes.append(
                    BatchItemResult(id=record_id, key=record.key, results=outcome.results)
                )
            else:
                batch.errors.append(f"Failed to save translation for ID {record_id}")

        logger.info(
            "batch_translation_finished",
            requested=len(record_ids),
            succeeded=len(batch.successes),
            errors=len(batch.errors),
        )
        return batch

    def _find_record(self, record_id: int) -> TranslationRecord | None:
        for record in self.cache.build_aggregate():
            if record.id == record_id:
                return record
        return None

    @staticmethod
    def _normalize_results(raw: Mapping[str, str], requested: Mapping[str, str]) -> dict[str, str]:
        """Map provider keys (codes or language names) back onto requested codes."""

        lookup = {code.lower(): code for code in requested}
        lookup.update({name.lower(): code for code, name in requested.items()})
        results: dict[str, str] = {}
        for key, text in raw.items():
            if key in requested:
                results[key] = text
            elif key.lower() in lookup:
                results[lookup[key.lower()]] = text
            else:
                logger.warning("unmapped_translation_key", key=key)
        return results


__all__ = ["TranslationOrchestrator"]
