from fastapi import APIRouter

from i18n_server.web.routers import files, translate, translations


def setup_routers() -> APIRouter:
    router = APIRouter()
    router.include_router(translations.router)
    router.include_router(files.router)
    router.include_router(translate.router)
    return router


__all__ = ["setup_routers"]
