"""
TibiaData API Client

Fetches guild snapshots and single characters from TibiaData v4.
"""

import logging
from typing import Dict, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..base_client import BaseAPIClient
from .models import CharacterResponse, GuildResponse
from ....core.config import RemoteAPIConfig
from ....core.exceptions import NotFoundError, RemoteFetchError
from ....domain.roster.models import (
    OFFLINE,
    ExternalCharacter,
    Guild,
    GuildMember,
)
from ....utils.datetime_utils import from_iso

logger = logging.getLogger(__name__)

R = TypeVar('R', bound=BaseModel)


class TibiaDataClient(BaseAPIClient):
    """Remote roster source backed by TibiaData."""

    def __init__(
        self,
        guild_name: str,
        world: str,
        base_url: str = "https://api.tibiadata.com/v4",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize TibiaData client.

        Args:
            guild_name: Guild whose roster is fetched
            world: World used to resolve a character's status
            base_url: API base URL
            timeout: Deadline for one call in seconds
            transport: Optional httpx transport, used by tests
        """
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self.guild_name = guild_name
        self.world = world

    @classmethod
    def from_config(
        cls,
        config: RemoteAPIConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "TibiaDataClient":
        return cls(
            guild_name=config.guild_name,
            world=config.world,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport
        )

    def default_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _decode(self, schema: Type[R], payload, endpoint: str) -> R:
        try:
            return schema.model_validate(payload)
        except PydanticValidationError as e:
            raise RemoteFetchError(
                f"Unexpected response shape from {endpoint}",
                endpoint=endpoint,
                details={"errors": e.errors(include_url=False)},
                original_exception=e
            ) from e

    async def fetch_guild(self) -> Guild:
        """Fetch the full guild snapshot."""
        endpoint = f"/guild/{quote(self.guild_name)}"
        payload = await self.get_json(endpoint)
        remote = self._decode(GuildResponse, payload, endpoint).guild

        logger.debug(
            f"Fetched guild {remote.name}: {len(remote.members)} members, "
            f"{remote.players_online} online"
        )

        return Guild(
            name=remote.name,
            players_online=remote.players_online,
            players_offline=remote.players_offline,
            members_total=remote.members_total,
            members=[
                GuildMember(
                    name=m.name,
                    level=m.level,
                    vocation=m.vocation,
                    status=m.status,
                )
                for m in remote.members
            ],
        )

    async def fetch_character(self, name: str) -> ExternalCharacter:
        """
        Fetch one character.

        The online status comes from the account's character list entry
        on the configured world; a character missing there is offline.
        """
        endpoint = f"/character/{quote(name)}"
        try:
            payload = await self.get_json(endpoint)
        except RemoteFetchError as e:
            if e.status_code == 404:
                raise NotFoundError("Character", name) from e
            raise

        response = self._decode(CharacterResponse, payload, endpoint)

        http_code = response.information.status.http_code
        if http_code == 404 or not response.character.character.name:
            raise NotFoundError("Character", name)
        if not 200 <= http_code < 300:
            raise RemoteFetchError(
                f"API returned {http_code}",
                status_code=http_code,
                endpoint=endpoint
            )

        character = response.character.character
        status = next(
            (
                other.status
                for other in response.character.other_characters or []
                if other.name == character.name and other.world == self.world
            ),
            OFFLINE
        )

        return ExternalCharacter(
            name=character.name,
            level=character.level,
            vocation=character.vocation,
            status=status,
            last_seen=from_iso(character.last_login),
        )
