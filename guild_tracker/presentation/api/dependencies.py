"""
FastAPI dependencies.

Services are resolved from the container stored on the application.
"""

import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Query, Request

from ...application.services import ExternalCharacterTracker, GuildService
from ...core.config import Settings
from ...core.container import Container
from ...infrastructure.database import DatabaseConnection

logger = logging.getLogger(__name__)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings(request: Request) -> Settings:
    return get_container(request).settings()


def get_database(request: Request) -> DatabaseConnection:
    return get_container(request).database()


def get_guild_service(request: Request) -> GuildService:
    return get_container(request).guild_service()


def get_external_tracker(request: Request) -> ExternalCharacterTracker:
    return get_container(request).external_tracker()


async def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
    api_key: Optional[str] = Query(default=None)
) -> None:
    """
    Static API key check.

    The key is read from the x-api-key header, then from the api_key query
    parameter. Without a configured key every guarded route is refused.
    """
    expected = get_settings(request).server.api_key
    provided = x_api_key or api_key

    if not expected:
        logger.warning(f"API_KEY is not configured, refusing {request.method} {request.url.path}")
        raise HTTPException(status_code=403, detail="Forbidden")

    if not provided:
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not secrets.compare_digest(provided.encode(), expected.encode()):
        logger.warning(f"Rejected API key on {request.method} {request.url.path}")
        raise HTTPException(status_code=403, detail="Forbidden")
