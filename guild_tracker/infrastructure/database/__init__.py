"""
Database Infrastructure

Database connections, repositories and the write retry policy.
"""

from .connection import DatabaseConnection
from .repositories import (
    BaseRepository,
    MemberRepository,
    MessageRepository,
    ExternalCharacterRepository,
)
from .retry import RetryPolicy, is_contention_error

__all__ = [
    "DatabaseConnection",
    "BaseRepository",
    "MemberRepository",
    "MessageRepository",
    "ExternalCharacterRepository",
    "RetryPolicy",
    "is_contention_error",
]
