"""FastAPI application factory.

Routes:
- ``/`` and ``/health``: service metadata
- ``/api/vod/*``: read API (list, detail, search, class, stats)
- ``/admin/collect``: synchronous manual ingestion
- ``/cron/collect``: background ingestion for the external scheduler

Anything else answers 404 ``{"error": "Not Found"}``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Generator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vodcatalog import __version__
from vodcatalog.config import Settings, configure_logging, load_settings
from vodcatalog.db import session as db_session
from vodcatalog.db.repo import DbSession
from vodcatalog.ingest.collector import ClientFactory, CollectionConfigError, SessionFactory
from vodcatalog.upstream.client import UpstreamClient

SERVICE_NAME = "VOD API Service (Free Version)"
SERVICE_NOTE = "No Queue dependency, using direct Cron Trigger"

# Handlers answer whatever the method; CORS preflight stays with the middleware
ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def get_settings() -> Settings:
    """Dependency returning settings read from the environment."""
    return load_settings()


def get_session_factory(settings: Settings = Depends(get_settings)) -> SessionFactory:
    """Dependency returning the session factory for the configured database."""
    return db_session.get_session_factory(settings.db_path)


def get_db_session(
    factory: SessionFactory = Depends(get_session_factory),
) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = factory()
    try:
        yield session
    finally:
        session.close()


def get_client_factory(settings: Settings = Depends(get_settings)) -> ClientFactory:
    """Dependency returning a factory of upstream clients.

    The factory raises CollectionConfigError when no upstream URL is set,
    so the failure surfaces where ingestion starts.
    """

    def factory() -> UpstreamClient:
        if not settings.source_api_url:
            raise CollectionConfigError("SOURCE_API_URL is not configured")
        return UpstreamClient(
            settings.source_api_url,
            timeout=settings.upstream_timeout_seconds,
        )

    return factory


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = app.dependency_overrides.get(get_settings, get_settings)()
    configure_logging(settings.log_level)
    db_session.init_db(settings.db_path)
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional fixed settings; by default they are read from
            the environment on every request.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="VOD Catalog API",
        description="Video catalog backed by a periodically refreshed upstream listing",
        version=__version__,
        lifespan=_lifespan,
        redirect_slashes=False,
    )

    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings

    # Permissive CORS: the catalog is public and read-only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Render routing errors as ``{"error": ...}``."""
        error = "Not Found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse({"error": error}, status_code=exc.status_code)

    @app.api_route("/", methods=ANY_METHOD)
    @app.api_route("/health", methods=ANY_METHOD)
    def health_check() -> dict:
        """Service metadata and status."""
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "status": "healthy",
            "endpoints": {
                "api": "/api/vod/*",
                "admin": "/admin/collect?api_key=YOUR_KEY",
                "stats": "/api/vod/stats",
            },
            "note": SERVICE_NOTE,
        }

    # Include routes
    from vodcatalog.api.routes import collect, vod

    app.include_router(vod.router, prefix="/api/vod")
    app.include_router(collect.router)

    # Registered last: anything else starting with /api/vod, including /api/vodx
    app.add_api_route(
        "/api/vod{unknown:path}",
        vod.endpoint_not_found,
        methods=ANY_METHOD,
        include_in_schema=False,
    )

    return app


# Default app instance
app = create_app()
