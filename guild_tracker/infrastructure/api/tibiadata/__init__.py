"""
TibiaData API

Client and response models for the TibiaData v4 API.
"""

from .client import TibiaDataClient
from .models import (
    GuildResponse,
    CharacterResponse,
)

__all__ = [
    "TibiaDataClient",
    "GuildResponse",
    "CharacterResponse",
]
