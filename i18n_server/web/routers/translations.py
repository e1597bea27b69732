"""CRUD routes over translation records."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from i18n_server.domain.models import RecordFilter, TranslationRecord
from i18n_server.services.records import RecordService
from i18n_server.web.dependencies import get_records
from i18n_server.web.schemas import CreateTranslationRequest, UpdateTranslationRequest

router = APIRouter(prefix="/api/translations", tags=["translations"])


@router.get("", response_model=list[TranslationRecord])
async def list_translations(
    q: str | None = Query(default=None),
    file: str | None = Query(default=None),
    key: str | None = Query(default=None),
    records: RecordService = Depends(get_records),
) -> list[TranslationRecord]:
    return records.get_all_records(RecordFilter(search=q, file=file, key=key))


@router.get("/{record_id}", response_model=TranslationRecord)
async def get_translation(
    record_id: int,
    records: RecordService = Depends(get_records),
) -> TranslationRecord:
    return records.get_record(record_id)


@router.post("", status_code=201)
async def create_translation(
    payload: CreateTranslationRequest,
    records: RecordService = Depends(get_records),
) -> dict:
    record = records.create_record(payload.key, payload.file, payload.translations)
    return {**record.model_dump(), "message": "Translation added successfully"}


@router.put("/{record_id}")
async def update_translation(
    record_id: int,
    payload: UpdateTranslationRequest,
    records: RecordService = Depends(get_records),
) -> dict:
    record = records.update_record(
        record_id,
        key=payload.key,
        file_name=payload.file,
        translations=payload.translations,
    )
    return {**record.model_dump(), "message": "Translation updated successfully"}


@router.delete("/{record_id}")
async def delete_translation(
    record_id: int,
    records: RecordService = Depends(get_records),
) -> dict:
    records.delete_record(record_id)
    return {"message": "Translation deleted successfully"}


__all__ = ["router"]
