"""
Roster Source Protocol Definition

Defines the interface for the remote roster API client.
"""

from typing import Protocol

from ...domain.roster.models import ExternalCharacter, Guild


class RosterSourceProtocol(Protocol):
    """Protocol for remote roster sources."""

    async def fetch_guild(self) -> Guild:
        """
        Fetch a full guild snapshot.

        Raises:
            RemoteFetchError: Network failure, non-2xx or malformed payload
            RemoteTimeoutError: Deadline exceeded
        """
        ...

    async def fetch_character(self, name: str) -> ExternalCharacter:
        """
        Fetch a single character.

        Raises:
            NotFoundError: Character does not exist
            RemoteFetchError: Network failure, non-2xx or malformed payload
            RemoteTimeoutError: Deadline exceeded
        """
        ...
