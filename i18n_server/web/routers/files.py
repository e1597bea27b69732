"""Language, resource-file, cache and export routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from i18n_server.services import archive
from i18n_server.services.records import RecordService
from i18n_server.web.dependencies import get_records
from i18n_server.web.schemas import CreateFileRequest

router = APIRouter(prefix="/api", tags=["files"])


@router.get("/languages")
async def list_languages(records: RecordService = Depends(get_records)) -> list[str]:
    return records.list_languages()


@router.get("/files")
async def list_files(records: RecordService = Depends(get_records)) -> list[str]:
    return records.list_resource_files()


@router.post("/create-file")
async def create_file(
    payload: CreateFileRequest,
    records: RecordService = Depends(get_records),
) -> Any:
    outcome = records.create_resource_file(payload.file_name)
    if outcome.already_exists:
        return JSONResponse(status_code=409, content={"error": "File name already exists"})
    if outcome.created_count == 0 and outcome.errors:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to create file", "errors": outcome.errors},
        )

    body: dict[str, Any] = {
        "success": True,
        "message": f"Successfully created file {outcome.name}.json",
        "fileName": outcome.name,
        "createdCount": outcome.created_count,
        "totalLanguages": len(records.list_languages()),
    }
    if outcome.errors:
        body["errors"] = outcome.errors
    return body


@router.post("/refresh-cache")
async def refresh_cache(records: RecordService = Depends(get_records)) -> dict[str, Any]:
    status = records.refresh_cache()
    return {
        "success": True,
        "message": "Cache refreshed successfully",
        "cacheSize": status.cache_size,
        "lastUpdated": status.last_updated.isoformat() if status.last_updated else None,
    }


@router.get("/export-data")
async def export_data(records: RecordService = Depends(get_records)) -> StreamingResponse:
    chunks = records.stream_archive()
    filename = archive.export_filename()
    return StreamingResponse(
        chunks,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


__all__ = ["router"]
