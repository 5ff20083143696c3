"""
Core Protocol Definitions

This module defines the interfaces that all implementations must follow.
"""

from .cache_protocol import CacheProtocol
from .repository_protocol import MemberStoreProtocol
from .roster_source_protocol import RosterSourceProtocol

__all__ = [
    "CacheProtocol",
    "MemberStoreProtocol",
    "RosterSourceProtocol",
]
