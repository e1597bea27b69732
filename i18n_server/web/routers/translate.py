"""Machine-translation routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends

from i18n_server.domain.models import TranslationOutcome
from i18n_server.services.orchestrator import TranslationOrchestrator
from i18n_server.web.dependencies import get_orchestrator
from i18n_server.web.schemas import AutoTranslateRequest, BatchTranslateRequest, TranslateOnlyRequest

router = APIRouter(prefix="/api", tags=["translate"])


def _outcome_body(outcome: TranslationOutcome, message: str) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": bool(outcome.results) or not outcome.errors,
        "message": message,
        "results": outcome.results,
    }
    if outcome.errors:
        body["errors"] = outcome.errors
    return body


@router.post("/auto-translate/{record_id}")
async def auto_translate(
    record_id: int,
    payload: AutoTranslateRequest | None = None,
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    payload = payload or AutoTranslateRequest()
    outcome = await orchestrator.auto_translate(
        record_id, payload.source_language, payload.target_languages
    )
    return _outcome_body(outcome, "Auto-translation completed")


@router.post("/translate-only")
async def translate_only(
    payload: TranslateOnlyRequest,
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    outcome = await orchestrator.translate_only(
        payload.text, payload.source_language, payload.target_languages
    )
    return _outcome_body(outcome, "Translation completed")


@router.post("/batch-translate")
async def batch_translate(
    payload: BatchTranslateRequest,
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    batch = await orchestrator.batch_translate(
        payload.ids, payload.source_language, payload.target_languages
    )
    body: dict[str, Any] = {
        "success": True,
        "message": f"Batch translation completed, processed {len(batch.successes)} entries",
        "results": [asdict(item) for item in batch.successes],
    }
    if batch.errors:
        body["errors"] = batch.errors
    return body


__all__ = ["router"]
