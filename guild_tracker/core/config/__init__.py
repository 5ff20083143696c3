"""
Configuration Management

Centralized configuration for the application.
"""

from .settings import (
    Settings,
    RemoteAPIConfig,
    DatabaseConfig,
    CacheConfig,
    SyncConfig,
    ServerConfig,
)
from .loader import ConfigLoader

__all__ = [
    "Settings",
    "RemoteAPIConfig",
    "DatabaseConfig",
    "CacheConfig",
    "SyncConfig",
    "ServerConfig",
    "ConfigLoader",
]
