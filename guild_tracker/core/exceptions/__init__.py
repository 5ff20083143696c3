"""
Core Exceptions

Base exception classes for the application.
"""

from .base import (
    GuildTrackerError,
    RemoteSourceError,
    RemoteFetchError,
    RemoteTimeoutError,
    PersistenceContentionError,
    ReconciliationError,
    ValidationError,
    DuplicateCharacterError,
    NotFoundError,
    ConfigurationError,
)

__all__ = [
    "GuildTrackerError",
    "RemoteSourceError",
    "RemoteFetchError",
    "RemoteTimeoutError",
    "PersistenceContentionError",
    "ReconciliationError",
    "ValidationError",
    "DuplicateCharacterError",
    "NotFoundError",
    "ConfigurationError",
]
