"""
FastAPI application for the DevEvent API.

This module:
- Builds the app with its shared services on app.state
- Manages the MongoDB connection across the app lifespan
- Renders request validation failures in the response envelope
- Provides the health check endpoint
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from devevent import __version__
from devevent.api.responses import envelope
from devevent.api.routes import bookings_router, events_router
from devevent.config import Settings, get_settings
from devevent.database import ConnectionManager, ensure_indexes
from devevent.observability import initialize_logfire
from devevent.services.media import MediaClient, create_media_client

logger = logging.getLogger(__name__)


def build_connection_manager(settings: Settings) -> ConnectionManager:
    return ConnectionManager(
        uri=settings.mongodb_uri,
        database_name=settings.mongodb_database,
        server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
        on_connect=ensure_indexes,
    )


def build_media_client(settings: Settings) -> MediaClient:
    return create_media_client(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        folder=settings.uploads.folder,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    The connection is warmed on startup but a failure there is not fatal:
    the next request retries through the ConnectionManager.
    """
    connections: ConnectionManager = app.state.connections
    logger.info(f"Starting DevEvent API ({app.state.settings.environment})")

    if await connections.ping():
        info = connections.info()
        logger.info(f"MongoDB connection successful: {info['url']} ({info['database']})")
    else:
        logger.error("MongoDB connection failed, will retry on first request")

    yield

    logger.info("Shutting down DevEvent API")
    connections.close()


def create_app(
    settings: Optional[Settings] = None,
    connections: Optional[ConnectionManager] = None,
    media_client: Optional[MediaClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="DevEvent API",
        description="Event listing and booking API",
        version=__version__,
        docs_url="/api/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.connections = connections or build_connection_manager(settings)
    app.state.media_client = media_client or build_media_client(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return envelope(status.HTTP_400_BAD_REQUEST, "Invalid request", error=errors)

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, str]:
        """Health check endpoint for load balancers and monitoring."""
        db_connected = await app.state.connections.ping()
        return {
            "status": "healthy" if db_connected else "degraded",
            "service": "devevent-api",
            "version": __version__,
            "database": "connected" if db_connected else "disconnected",
            "environment": settings.environment,
        }

    app.include_router(events_router, prefix="/api")
    app.include_router(bookings_router, prefix="/api")

    initialize_logfire(settings, app)

    return app
