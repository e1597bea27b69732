"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from i18n_server import __version__
from i18n_server.config import ServerSettings
from i18n_server.locales.cache import TranslationCache
from i18n_server.locales.scanner import scan_locales_directory
from i18n_server.logging import logger
from i18n_server.services.orchestrator import TranslationOrchestrator
from i18n_server.services.provider import TranslationProviderClient
from i18n_server.services.records import RecordService
from i18n_server.web.errors import register_exception_handlers
from i18n_server.web.routers import setup_routers


def build_cache(settings: ServerSettings) -> TranslationCache:
    inventory = scan_locales_directory(settings.locales_path)
    return TranslationCache(settings.locales_path, inventory.languages, inventory.resource_files)


def create_app(
    settings: ServerSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app; the cache is preloaded and the HTTP client opened on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        cache = build_cache(settings)
        cache.preload()
        async with httpx.AsyncClient(
            transport=transport,
            timeout=settings.translation.request_timeout_seconds,
        ) as client:
            provider = TranslationProviderClient(client, settings=settings.translation)
            app.state.cache = cache
            app.state.records = RecordService(
                cache, reference_language=settings.duplicate_check_language
            )
            app.state.orchestrator = TranslationOrchestrator(
                cache,
                provider,
                settings.translation,
                default_source_language=settings.default_source_language,
            )
            logger.info(
                "server_ready",
                locales_path=str(settings.locales_path),
                languages=cache.languages,
                files=cache.resource_files,
            )
            yield
        logger.info("server_stopped")

    app = FastAPI(title="i18n-server", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    register_exception_handlers(app)
    app.include_router(setup_routers())

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "i18n-server"}

    if settings.static_path.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_path, html=True), name="static")
    return app


__all__ = ["build_cache", "create_app"]
