"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.api.auth import router as auth_router
from src.api.management import router as management_router
from src.api.payments import router as payments_router
from src.api.tenant import router as tenant_router
from src.config.settings import Settings, get_settings
from src.models import Base
from src.services import build_engine, build_session_factory
from src.services.errors import AppError, error_response
from src.services.storage import LocalBlobStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup, dispose the engine on shutdown."""
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Database tables initialized")
    yield
    app.state.engine.dispose()
    logger.info("Application shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with its own engine, session factory and blob store.

    Args:
        settings: Settings to use (default: loaded from environment)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Rent collection and tenant management",
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.database_echo)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.store = LocalBlobStore(settings.storage_dir, settings.storage_public_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.base_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        logger.debug("api.error: path=%s code=%s message=%s", request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.http_status, content=error_response(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Error in {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": {"code": "server_error", "message": "Server error"}},
        )

    app.include_router(auth_router)
    app.include_router(management_router)
    app.include_router(tenant_router)
    app.include_router(payments_router)

    # Uploaded tenant documents
    storage_path = Path(settings.storage_dir)
    storage_path.mkdir(parents=True, exist_ok=True)
    app.mount(settings.storage_url_prefix, StaticFiles(directory=str(storage_path)), name="files")
    logger.info(f"Serving documents from {storage_path} at {settings.storage_url_prefix}")

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint for monitoring."""
        return {"status": "ok"}

    return app


__all__ = ["create_app"]
