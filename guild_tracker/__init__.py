"""
Guild Tracker

Tracks an online game guild's roster against the TibiaData API, keeps
locally owned member state and serves cached analyses over HTTP.
"""

__version__ = "1.0.0"

# Public API exports
from .core.config import Settings
from .core.exceptions import GuildTrackerError

__all__ = [
    "Settings",
    "GuildTrackerError",
]
