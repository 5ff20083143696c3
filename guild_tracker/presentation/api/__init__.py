"""
HTTP API

FastAPI application, routers and exception handlers.
"""

from .app import create_app

__all__ = ["create_app"]
