"""
API Infrastructure

Remote roster source clients.
"""

from .base_client import BaseAPIClient
from .tibiadata import TibiaDataClient

__all__ = [
    "BaseAPIClient",
    "TibiaDataClient",
]
