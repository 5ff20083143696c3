"""
Guild Tracker API - Application Factory
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .errors import register_exception_handlers
from .routes import external_router, guild_router, messages_router
from ...core.container import Container, initialize_container, shutdown_container

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, start_poller: bool = True) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Container to serve from, a new one when omitted
        start_poller: Whether the background roster poller runs

    Returns:
        Configured application
    """
    container = container or Container()
    settings = container.settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store and source, run the poller, then tear down."""
        logger.info(f"Starting {settings.app_name}...")

        await initialize_container(container)
        logger.info("Store and roster source ready")

        poller = container.poller() if start_poller else None
        if poller:
            poller.start()

        yield

        logger.info(f"Shutting down {settings.app_name}...")
        if poller:
            await poller.stop()
        await shutdown_container(container)

    app = FastAPI(
        title=settings.app_name,
        description="Guild roster tracking with tiered caching",
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Access log
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        logger.info(
            f"{request.method} {request.url.path} - "
            f"{response.status_code} - {elapsed:.3f}s"
        )

        return response

    register_exception_handlers(app)

    app.include_router(guild_router)
    app.include_router(external_router)
    app.include_router(messages_router)

    @app.get("/")
    async def root():
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "endpoints": {
                "guildData": "/api/guild/data",
                "forceRefresh": "/api/guild/force-refresh",
                "health": "/api/guild/health",
                "stats": "/api/guild/stats",
                "combinedData": "/api/guild/combined-data",
                "external": "/api/guild/external/list",
                "messages": "/api/messages",
            },
        }

    return app
