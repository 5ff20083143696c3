"""
HTTP API tests driven through the FastAPI test client.
"""

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from guild_tracker.core.config import DatabaseConfig, ServerConfig, Settings, SyncConfig
from guild_tracker.core.container import Container
from guild_tracker.core.exceptions import RemoteFetchError, RemoteTimeoutError
from guild_tracker.presentation.api import create_app

from conftest import make_character, make_guild, make_member

API_KEY = "test-key"
AUTH = {"x-api-key": API_KEY}


def build_container(tmp_path, source, api_key=API_KEY):
    settings = Settings(
        database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"),
        server=ServerConfig(api_key=api_key),
        sync=SyncConfig(external_call_delay=0, external_batch_delay=0),
    )
    container = Container()
    container.settings.override(providers.Object(settings))
    container.source_client.override(providers.Object(source))
    return container


@pytest.fixture
def guild_source(source):
    source.guild = make_guild([
        make_member("Alice", level=450),
        make_member("Bob", level=200, vocation="Druid", status="offline"),
    ])
    source.characters["Xena"] = make_character("Xena")
    return source


@pytest.fixture
def client(tmp_path, guild_source):
    app = create_app(build_container(tmp_path, guild_source), start_poller=False)
    with TestClient(app) as test_client:
        yield test_client


class TestGuildRoutes:
    """Test /api/guild."""

    def test_root_lists_endpoints(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["guildData"] == "/api/guild/data"

    def test_data(self, client):
        response = client.get("/api/guild/data")

        body = response.json()
        assert response.status_code == 200
        assert body["info"]["total"] == 2
        assert [m["name"] for m in body["sorted"]] == ["Alice"]

    def test_force_refresh(self, client, guild_source):
        client.get("/api/guild/data")

        response = client.get("/api/guild/force-refresh")

        body = response.json()
        assert body["cache"] == "refreshed"
        assert "timestamp" in body
        assert guild_source.guild_calls == 2

    def test_health(self, client):
        response = client.get("/api/guild/health")

        body = response.json()
        assert body["status"] == "OK"
        assert body["database"] is True
        assert set(body["cache"]) == {"raw", "analysis", "external", "combined"}

    def test_stats(self, client):
        client.get("/api/guild/data")

        response = client.get("/api/guild/stats")

        assert response.json()["total_members"] == 2

    def test_mark_and_unmark_exited(self, client):
        client.get("/api/guild/data")

        assert client.post("/api/guild/mark-exited/Alice", headers=AUTH).status_code == 200
        body = client.get("/api/guild/data").json()
        assert [m["name"] for m in body["exited"]["sorted"]] == ["Alice"]

        assert client.post("/api/guild/unmark-exited/Alice", headers=AUTH).status_code == 200
        body = client.get("/api/guild/data").json()
        assert body["exited"]["count"] == 0

    def test_mark_unknown_member(self, client):
        response = client.post("/api/guild/mark-exited/Nobody", headers=AUTH)

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"

    def test_remote_timeout_maps_to_504(self, client, guild_source):
        guild_source.guild_error = RemoteTimeoutError(endpoint="/guild/x", timeout=10.0)

        assert client.get("/api/guild/data").status_code == 504

    def test_remote_failure_maps_to_generic_500(self, client, guild_source):
        guild_source.guild_error = RemoteFetchError("API returned 500", status_code=500)

        response = client.get("/api/guild/data")

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"


class TestApiKey:
    """Test the static key guard."""

    def test_missing_key(self, client):
        assert client.post("/api/guild/mark-exited/Alice").status_code == 401

    def test_wrong_key(self, client):
        response = client.post("/api/guild/mark-exited/Alice", headers={"x-api-key": "nope"})

        assert response.status_code == 403

    def test_query_parameter(self, client):
        client.get("/api/guild/data")

        response = client.post(f"/api/guild/mark-exited/Alice?api_key={API_KEY}")

        assert response.status_code == 200

    def test_external_routes_are_guarded(self, client):
        assert client.get("/api/guild/external/list").status_code == 401

    def test_unconfigured_key_refuses_everything(self, tmp_path, guild_source):
        app = create_app(build_container(tmp_path, guild_source, api_key=""), start_poller=False)

        with TestClient(app) as test_client:
            response = test_client.get("/api/guild/external/list", headers=AUTH)

        assert response.status_code == 403


class TestExternalRoutes:
    """Test /api/guild/external."""

    def test_add_list_remove(self, client):
        response = client.post("/api/guild/external/add", json={"name": "Xena"}, headers=AUTH)
        assert response.status_code == 200

        listed = client.get("/api/guild/external/list", headers=AUTH).json()
        assert [c["name"] for c in listed] == ["Xena"]

        response = client.delete("/api/guild/external/remove/Xena", headers=AUTH)
        assert response.status_code == 200
        assert client.get("/api/guild/external/list", headers=AUTH).json() == []

    def test_duplicate_add(self, client):
        client.post("/api/guild/external/add", json={"name": "Xena"}, headers=AUTH)

        response = client.post("/api/guild/external/add", json={"name": "Xena"}, headers=AUTH)

        assert response.status_code == 400
        assert response.json()["error"] == "DuplicateCharacterError"

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "x" * 51}])
    def test_invalid_name(self, client, body):
        response = client.post("/api/guild/external/add", json=body, headers=AUTH)

        assert response.status_code == 400

    def test_unknown_character(self, client):
        response = client.post("/api/guild/external/add", json={"name": "Ghost"}, headers=AUTH)

        assert response.status_code == 404

    def test_mark_exited_and_combined(self, client):
        client.post("/api/guild/external/add", json={"name": "Xena"}, headers=AUTH)

        assert client.post("/api/guild/external/mark-exited/Xena", headers=AUTH).status_code == 200
        body = client.get("/api/guild/external/combined-data", headers=AUTH).json()

        assert body["external"]["exited"] == 1
        assert [m["name"] for m in body["exited"]["sorted"]] == ["Xena"]

    def test_sync(self, client, guild_source):
        client.post("/api/guild/external/add", json={"name": "Xena"}, headers=AUTH)
        guild_source.characters["Xena"] = make_character("Xena", level=999)

        response = client.post("/api/guild/external/sync", headers=AUTH)

        assert response.json()["updated"] == ["Xena"]
        listed = client.get("/api/guild/external/list", headers=AUTH).json()
        assert listed[0]["level"] == 999


class TestMessageRoutes:
    """Test /api/messages."""

    def test_post_and_list(self, client):
        response = client.post(
            "/api/messages/", json={"name": "Alice", "message": "Back at 8pm"}, headers=AUTH
        )
        assert response.status_code == 200

        messages = client.get("/api/messages/").json()
        assert [m["message"] for m in messages] == ["Back at 8pm"]

    def test_message_too_long(self, client):
        response = client.post(
            "/api/messages/", json={"name": "Alice", "message": "x" * 51}, headers=AUTH
        )

        assert response.status_code == 400

    def test_post_requires_key(self, client):
        response = client.post("/api/messages/", json={"name": "Alice", "message": "hi"})

        assert response.status_code == 401

    def test_cleanup(self, client):
        client.get("/api/guild/data")
        client.post("/api/messages/", json={"name": "Bob", "message": "afk"}, headers=AUTH)

        response = client.post("/api/messages/cleanup", headers=AUTH)

        assert response.json() == {"removed": 1}
