"""
Core Model Definitions

Base models and mixins for the application.
"""

from .base import (
    Base,
    NamedModel,
    TimestampedModel,
)

__all__ = [
    "Base",
    "NamedModel",
    "TimestampedModel",
]
