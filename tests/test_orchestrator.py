"""Multi-target translation, pacing and batch behaviour."""

from __future__ import annotations

import pytest

from i18n_server.config import TranslationSettings
from i18n_server.locales.cache import TranslationCache
from i18n_server.services.exceptions import InvalidInput, ProviderError, RecordNotFound
from i18n_server.services.orchestrator import TranslationOrchestrator


def _orchestrator(cache, provider, **settings) -> TranslationOrchestrator:
    values = {"request_delay_seconds": 0, **settings}
    return TranslationOrchestrator(cache, provider, TranslationSettings(**values), default_source_language="zh")


def _record_id(cache: TranslationCache, file_name: str, key: str) -> int:
    for record in cache.build_aggregate():
        if record.file == file_name and record.key == key:
            return record.id
    raise AssertionError(f"{file_name}:{key} missing")


@pytest.mark.asyncio
async def test_translate_multiple_batches_languages_into_one_call(cache, fake_provider):
    orchestrator = _orchestrator(cache, fake_provider)

    outcome = await orchestrator.translate_multiple("你好", "zh", ["en", "de"])

    assert fake_provider.calls == [(["English", "German"], ["你好"])]
    assert outcome.results == {"en": "你好 [English]", "de": "你好 [German]"}
    assert outcome.errors == []


@pytest.mark.asyncio
async def test_unknown_language_is_reported_not_raised(cache, fake_provider):
    orchestrator = _orchestrator(cache, fake_provider)

    outcome = await orchestrator.translate_multiple("hello", "en", ["xx"])

    assert outcome.results == {}
    assert any("xx" in error for error in outcome.errors)
    assert fake_provider.calls == []


@pytest.mark.asyncio
async def test_unknown_language_does_not_abort_the_rest(cache, fake_provider):
    orchestrator = _orchestrator(cache, fake_provider)

    outcome = await orchestrator.translate_multiple("你好", "zh", ["xx", "en"])

    assert outcome.results == {"en": "你好 [English]"}
    assert outcome.errors == ["Unknown language code: xx"]


@pytest.mark.asyncio
async def test_provider_failure_yields_single_error_and_no_results(cache, failing_provider):
    provider = failing_provider(ProviderError("timeout"))
    orchestrator = _orchestrator(cache, provider)

    outcome = await orchestrator.translate_multiple("你好", "zh", ["en", "ja"])

    assert outcome.results == {}
    assert len(outcome.errors) == 1
    assert "timeout" in outcome.errors[0]


@pytest.mark.asyncio
async def test_delay_is_awaited_even_when_nothing_translated(cache, fake_provider, monkeypatch):
    pauses: list[float] = []

    async def _record_sleep(delay):
        pauses.append(delay)

    monkeypatch.setattr("i18n_server.services.orchestrator.asyncio.sleep", _record_sleep)
    orchestrator = _orchestrator(cache, fake_provider, request_delay_seconds=1.5)

    await orchestrator.translate_multiple("hello", "en", ["xx"])
    await orchestrator.translate_multiple("hello", "en", ["zh"], delay=0.25)
    await orchestrator.translate_multiple("hello", "en", ["zh"], delay=0)

    assert pauses == [1.5, 0.25]


@pytest.mark.asyncio
async def test_delay_is_awaited_after_provider_failure(cache, failing_provider, monkeypatch):
    pauses: list[float] = []

    async def _record_sleep(delay):
        pauses.append(delay)

    monkeypatch.setattr("i18n_server.services.orchestrator.asyncio.sleep", _record_sleep)
    orchestrator = _orchestrator(cache, failing_provider(ProviderError("rate limited")), request_delay_seconds=2)

    outcome = await orchestrator.translate_multiple("你好", "zh", ["en"])

    assert outcome.results == {}
    assert len(outcome.errors) == 1
    assert pauses == [2]


@pytest.mark.asyncio
async def test_provider_keys_are_mapped_back_to_codes(cache):
    class CodeKeyedProvider:
        async def translate(self, target_languages, source_texts):
            return {"en": "Hi", "zh-tw": "嗨", "Klingon": "nuqneH"}

    orchestrator = _orchestrator(cache, CodeKeyedProvider())

    outcome = await orchestrator.translate_multiple("嗨", "zh", ["en", "zh-TW"])

    assert outcome.results == {"en": "Hi", "zh-TW": "嗨"}


@pytest.mark.asyncio
async def test_auto_translate_merges_only_returned_languages(cache, fake_provider, locales_root, load_dictionary):
    orchestrator = _orchestrator(cache, fake_provider)
    record_id = _record_id(cache, "common", "thanks")

    outcome = await orchestrator.auto_translate(record_id)

    assert fake_provider.calls == [(["English"], ["谢谢"])]
    assert outcome.results == {"en": "谢谢 [English]"}
    assert load_dictionary(locales_root, "en", "common")["thanks"] == "谢谢 [English]"
    assert load_dictionary(locales_root, "zh", "common")["thanks"] == "谢谢"


@pytest.mark.asyncio
async def test_auto_translate_preserves_languages_missing_from_results(cache, locales_root, load_dictionary):
    class PartialProvider:
        async def translate(self, target_languages, source_texts):
            return {"English": "Thanks"}

    cache.update_translation("thanks", "common", {"en": "Thank you"})
    orchestrator = _orchestrator(cache, PartialProvider())
    record_id = _record_id(cache, "common", "greet")

    outcome = await orchestrator.auto_translate(record_id, "zh", ["en"])

    assert outcome.results == {"en": "Thanks"}
    assert load_dictionary(locales_root, "en", "common") == {
        "greet": "Thanks",
        "bye": "Goodbye",
        "thanks": "Thank you",
    }


@pytest.mark.asyncio
async def test_auto_translate_requires_source_text(cache, fake_provider):
    orchestrator = _orchestrator(cache, fake_provider)

    with pytest.raises(InvalidInput):
        await orchestrator.auto_translate(_record_id(cache, "common", "bye"), "zh")
    with pytest.raises(RecordNotFound):
        await orchestrator.auto_translate(999)


@pytest.mark.asyncio
async def test_translate_only_does_not_persist(cache, fake_provider, locales_root, load_dictionary):
    orchestrator = _orchestrator(cache, fake_provider)
    before = load_dictionary(locales_root, "en", "common")

    outcome = await orchestrator.translate_only("早上好")

    assert outcome.results == {"en": "早上好 [English]"}
    assert load_dictionary(locales_root, "en", "common") == before

    with pytest.raises(InvalidInput):
        await orchestrator.translate_only("")


@pytest.mark.asyncio
async def test_batch_continues_past_missing_record(cache, fake_provider, locales_root, load_dictionary):
    orchestrator = _orchestrator(cache, fake_provider)
    greet = _record_id(cache, "common", "greet")
    title = _record_id(cache, "home", "title")

    batch = await orchestrator.batch_translate([greet, 999, title])

    assert [item.id for item in batch.successes] == [greet, title]
    assert batch.errors == ["Translation with ID 999 not found"]
    assert load_dictionary(locales_root, "en", "home") == {"title": "首页 [English]"}


@pytest.mark.asyncio
async def test_batch_reports_missing_source_and_provider_failures(cache, failing_provider):
    orchestrator = _orchestrator(cache, failing_provider(ProviderError("quota exceeded")))
    bye = _record_id(cache, "common", "bye")
    greet = _record_id(cache, "common", "greet")

    batch = await orchestrator.batch_translate([bye, greet], "zh")

    assert batch.successes == []
    assert batch.errors[0] == f"Source language zh for ID {bye} not found"
    assert "quota exceeded" in batch.errors[1]


@pytest.mark.asyncio
async def test_batch_requires_ids(cache, fake_provider):
    orchestrator = _orchestrator(cache, fake_provider)

    with pytest.raises(InvalidInput):
        await orchestrator.batch_translate([])
