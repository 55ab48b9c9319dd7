import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers import files as files_router
from app.api.routers import root as root_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.services.storage import StorageService


def create_app(
    settings: Settings | None = None,
    storage: StorageService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        debug=settings.debug,
        title="Sasken Gallery Upload API",
    )
    app.state.settings = settings
    app.state.storage = storage or StorageService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(root_router.router)
    app.include_router(files_router.router)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
