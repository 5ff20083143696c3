"""
Application Services

Orchestration of the roster source, the member store and the cache.
"""

from .reconciler import RosterReconciler, ReconcileReport, chunked
from .external_tracker import ExternalCharacterTracker, SyncReport, validate_name
from .guild_service import GuildService
from .poller import RosterPoller

__all__ = [
    "RosterReconciler",
    "ReconcileReport",
    "chunked",
    "ExternalCharacterTracker",
    "SyncReport",
    "validate_name",
    "GuildService",
    "RosterPoller",
]
