"""FastAPI dependency accessors for the services held on ``app.state``."""

from __future__ import annotations

from fastapi import Request

from i18n_server.services.orchestrator import TranslationOrchestrator
from i18n_server.services.records import RecordService


def get_records(request: Request) -> RecordService:
    return request.app.state.records


def get_orchestrator(request: Request) -> TranslationOrchestrator:
    return request.app.state.orchestrator


__all__ = ["get_orchestrator", "get_records"]
