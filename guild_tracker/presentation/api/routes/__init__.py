"""
API routers.
"""

from .guild import router as guild_router
from .external import router as external_router
from .messages import router as messages_router

__all__ = [
    "guild_router",
    "external_router",
    "messages_router",
]
