# imagecatalog/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .catalog import catalog_router
from .catalog.exceptions import CatalogError
from .catalog.schemas import HealthStatus
from .catalog.service import CatalogService
from .catalog.store import DocumentStore
from .config import Settings, load_settings
from .origin import install_origin_policy

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """Build the API around ``store``.

    When no store is given one is created from ``settings`` and closed
    again on shutdown; a store passed in stays owned by the caller.
    """
    settings = settings or load_settings()
    owns_store = store is None
    if store is None:
        store = DocumentStore.from_url(
            settings.mongo_url,
            default_database=settings.mongo_db_name,
            timeout_ms=settings.mongo_timeout_ms,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if await run_in_threadpool(store.ping):
            logger.info("MongoDB connected successfully (database %s)", store.database_name)
        else:
            logger.error("MongoDB connection error: %s is not answering", settings.mongo_uri)
        yield
        if owns_store:
            store.close()

    app = FastAPI(
        title="Image Catalog API",
        description="Read-only catalogue of images and banners backed by MongoDB.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog_service = CatalogService(store)

    install_origin_policy(app, settings.allowed_origins)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Liveness plus a store round-trip.
    @app.get("/", response_model=HealthStatus)
    def health_check(request: Request):
        up = request.app.state.catalog_service.store_is_up()
        return HealthStatus(status="ok" if up else "degraded", database="up" if up else "down")

    app.include_router(catalog_router)
    return app
