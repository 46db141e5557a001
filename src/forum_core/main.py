# src/forum_core/main.py
"""Main entry point for the forum JSON API."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from forum_core import __version__
from forum_core.api.errors import register_exception_handlers
from forum_core.api.v1 import (
    auth_router,
    comments_router,
    posts_router,
    tags_router,
    users_router,
)
from forum_core.core.settings import settings
from forum_core.services import Services, build_services

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(services: Services | None = None) -> FastAPI:
    """Build the FastAPI application around ``services``.

    When no services are supplied they are wired against the configured
    database, whose tables are created on startup.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Threads, comments and tags with role-based moderation",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(GZipMiddleware)

    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(comments_router, prefix="/api/v1")
    app.include_router(tags_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")

    if services is None:
        from forum_core.db.session import SessionLocal, create_tables

        services = build_services(settings, SessionLocal)

        @app.on_event("startup")
        async def on_startup() -> None:
            create_tables()
            logger.info("Database tables ensured at %s", settings.database_url)

    app.state.services = services

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    return app


configure_logging(settings.log_level)
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("forum_core.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
