"""
FastAPI application for Creative Showcase.
"""

from __future__ import annotations

import importlib.metadata
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .db.base import init_database
from .deps import media_store_for
from .errors import ServerError, ShowcaseError
from .logging_config import configure_logging
from .media import LocalMediaStore, MediaStoreError
from .routes import artworks_router, auth_router, users_router

# Initialize structured logging
logger = structlog.get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging(settings)
    logger.info("Starting Creative Showcase", environment=settings.environment)

    try:
        await init_database()
    except SQLAlchemyError as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down Creative Showcase")


app = FastAPI(
    title="Creative Showcase",
    description="Upload, browse, like and comment on artwork",
    version=importlib.metadata.version("creative-showcase"),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error rendering: {"detail": {"error": CODE, "message": text}}


@app.exception_handler(ShowcaseError)
async def showcase_error_handler(request: Request, exc: ShowcaseError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error", path=request.url.path, error=str(exc))
    error = ServerError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_dict()})


@app.exception_handler(MediaStoreError)
async def media_error_handler(request: Request, exc: MediaStoreError) -> JSONResponse:
    logger.error("Media store error", path=request.url.path, error=str(exc))
    error = ServerError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_dict()})


app.include_router(auth_router)
app.include_router(artworks_router)
app.include_router(users_router)


# Local media is served by the API itself
if settings.media_store_uri.startswith("file://") and settings.media_public_url.startswith("/"):
    _local_store = media_store_for(settings.media_store_uri, settings.media_public_url)
    if isinstance(_local_store, LocalMediaStore):
        app.mount(
            settings.media_public_url,
            StaticFiles(directory=_local_store.root, check_dir=False),
            name="media",
        )


@app.get("/health", tags=["system"])
async def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/version", tags=["system"])
def version() -> dict[str, str]:
    """Return the version of the application."""
    return {"version": importlib.metadata.version("creative-showcase")}
