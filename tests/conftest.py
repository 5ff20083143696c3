"""
Shared fixtures: temporary SQLite store, fake roster source, fake clocks.
"""

import os
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

# Keep a developer's .env from leaking into the tests
os.environ.setdefault("API_KEY", "")

from guild_tracker.core.config import CacheConfig
from guild_tracker.core.exceptions import NotFoundError
from guild_tracker.domain.roster.models import ExternalCharacter, Guild, GuildMember
from guild_tracker.infrastructure.cache import CacheService
from guild_tracker.infrastructure.database import (
    DatabaseConnection,
    ExternalCharacterRepository,
    MemberRepository,
    MessageRepository,
    RetryPolicy,
)


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """Wall clock for last-seen stamps."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingSleep:
    """Async sleep that returns at once and records the delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeRosterSource:
    """In-memory roster source."""

    def __init__(self, guild: Optional[Guild] = None):
        self.guild = guild
        self.characters: Dict[str, ExternalCharacter] = {}
        self.guild_error: Optional[Exception] = None
        self.character_errors: Dict[str, Exception] = {}
        self.guild_calls = 0
        self.character_calls: List[str] = []

    async def fetch_guild(self) -> Guild:
        self.guild_calls += 1
        if self.guild_error is not None:
            raise self.guild_error
        return self.guild

    async def fetch_character(self, name: str) -> ExternalCharacter:
        self.character_calls.append(name)
        if name in self.character_errors:
            raise self.character_errors[name]
        if name not in self.characters:
            raise NotFoundError("Character", name)
        return self.characters[name]


def make_member(
    name: str,
    level: int = 100,
    vocation: str = "Elite Knight",
    status: str = "online"
) -> GuildMember:
    return GuildMember(name=name, level=level, vocation=vocation, status=status)


def make_guild(members: List[GuildMember], name: str = "Felizes Para Sempre") -> Guild:
    online = sum(1 for m in members if m.status == "online")
    return Guild(
        name=name,
        players_online=online,
        players_offline=len(members) - online,
        members_total=len(members),
        members=members,
    )


def make_character(
    name: str,
    level: int = 300,
    vocation: str = "Royal Paladin",
    status: str = "online"
) -> ExternalCharacter:
    return ExternalCharacter(name=name, level=level, vocation=vocation, status=status)


@pytest.fixture
async def database(tmp_path):
    """Initialized SQLite database in a temporary file."""
    db = DatabaseConnection(f"sqlite+aiosqlite:///{tmp_path / 'guild_tracker.db'}")
    await db.initialize()
    yield db
    await db.shutdown()


@pytest.fixture
def member_repository(database):
    return MemberRepository(database)


@pytest.fixture
def message_repository(database):
    return MessageRepository(database)


@pytest.fixture
def external_repository(database):
    return ExternalCharacterRepository(database)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def retry_policy(sleep):
    return RetryPolicy(max_attempts=3, backoff_min=0.1, backoff_max=1.1, sleep=sleep)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wall_clock():
    return FakeWallClock()


@pytest.fixture
def cache(clock):
    config = CacheConfig(raw_ttl=60, analysis_ttl=15, external_ttl=30, combined_ttl=15)
    return CacheService(config, clock=clock)


@pytest.fixture
def source():
    return FakeRosterSource()
