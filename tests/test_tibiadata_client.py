"""
TibiaData client tests against an httpx mock transport.
"""

import asyncio
from datetime import datetime

import httpx
import pytest

from guild_tracker.core.exceptions import NotFoundError, RemoteFetchError, RemoteTimeoutError
from guild_tracker.infrastructure.api import TibiaDataClient

GUILD_PAYLOAD = {
    "guild": {
        "name": "Felizes Para Sempre",
        "world": "Penumbra",
        "players_online": 1,
        "players_offline": 1,
        "members_total": 2,
        "members": [
            {"name": "Alice", "title": "", "rank": "Leader", "vocation": "Elite Knight",
             "level": 450, "joined": "2020-01-01", "status": "online"},
            {"name": "Bob", "title": "", "rank": "Member", "vocation": "Druid",
             "level": 120, "joined": "2021-01-01", "status": "offline"},
        ],
    },
    "information": {"status": {"http_code": 200}},
}


def character_payload(name="Xena", world="Penumbra", status="online", http_code=200):
    return {
        "character": {
            "character": {
                "name": name,
                "level": 321,
                "vocation": "Royal Paladin",
                "world": "Penumbra",
                "last_login": "2024-03-01T18:30:00Z",
            },
            "other_characters": [
                {"name": name, "world": world, "status": status, "main": True},
                {"name": "Alt", "world": "Penumbra", "status": "online"},
            ],
        },
        "information": {"status": {"http_code": http_code}},
    }


def client_for(handler, timeout=10.0):
    return TibiaDataClient(
        guild_name="Felizes Para Sempre",
        world="Penumbra",
        timeout=timeout,
        transport=httpx.MockTransport(handler),
    )


class TestFetchGuild:
    """Test guild snapshot decoding."""

    async def test_decodes_snapshot(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=GUILD_PAYLOAD)

        async with client_for(handler) as client:
            guild = await client.fetch_guild()

        assert requests[0].url.path == "/v4/guild/Felizes Para Sempre"
        assert guild.members_total == 2
        assert [(m.name, m.status) for m in guild.members] == [
            ("Alice", "online"),
            ("Bob", "offline"),
        ]
        assert all(not m.is_exited for m in guild.members)

    async def test_missing_key_is_rejected(self):
        payload = {"guild": {k: v for k, v in GUILD_PAYLOAD["guild"].items() if k != "members"}}

        async with client_for(lambda request: httpx.Response(200, json=payload)) as client:
            with pytest.raises(RemoteFetchError):
                await client.fetch_guild()

    async def test_wrong_type_is_rejected(self):
        payload = {"guild": {**GUILD_PAYLOAD["guild"], "members": [
            {"name": "Alice", "vocation": "Knight", "level": "450", "status": "online"},
        ]}}

        async with client_for(lambda request: httpx.Response(200, json=payload)) as client:
            with pytest.raises(RemoteFetchError):
                await client.fetch_guild()

    async def test_invalid_json(self):
        async with client_for(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(RemoteFetchError):
                await client.fetch_guild()

    async def test_server_error(self):
        async with client_for(lambda request: httpx.Response(503)) as client:
            with pytest.raises(RemoteFetchError) as exc_info:
                await client.fetch_guild()

        assert exc_info.value.status_code == 503

    async def test_transport_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with client_for(handler) as client:
            with pytest.raises(RemoteTimeoutError):
                await client.fetch_guild()

    async def test_deadline(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json=GUILD_PAYLOAD)

        async with client_for(handler, timeout=0.05) as client:
            with pytest.raises(RemoteTimeoutError) as exc_info:
                await client.fetch_guild()

        assert not isinstance(exc_info.value, RemoteFetchError)

    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with client_for(handler) as client:
            with pytest.raises(RemoteFetchError):
                await client.fetch_guild()


class TestFetchCharacter:
    """Test single character lookups."""

    async def test_status_from_world_entry(self):
        async with client_for(lambda r: httpx.Response(200, json=character_payload())) as client:
            character = await client.fetch_character("Xena")

        assert character.name == "Xena"
        assert character.level == 321
        assert character.status == "online"
        assert character.is_external
        assert character.last_seen == datetime(2024, 3, 1, 18, 30, 0)

    async def test_other_world_counts_as_offline(self):
        payload = character_payload(world="Antica")

        async with client_for(lambda r: httpx.Response(200, json=payload)) as client:
            character = await client.fetch_character("Xena")

        assert character.status == "offline"

    async def test_missing_character_list(self):
        payload = character_payload()
        del payload["character"]["other_characters"]

        async with client_for(lambda r: httpx.Response(200, json=payload)) as client:
            character = await client.fetch_character("Xena")

        assert character.status == "offline"

    async def test_not_found_in_body(self):
        payload = character_payload(name="", http_code=404)

        async with client_for(lambda r: httpx.Response(200, json=payload)) as client:
            with pytest.raises(NotFoundError):
                await client.fetch_character("Ghost")

    async def test_not_found_status(self):
        async with client_for(lambda r: httpx.Response(404, json={})) as client:
            with pytest.raises(NotFoundError):
                await client.fetch_character("Ghost")
