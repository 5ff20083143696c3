"""
External Character Tracker

Manually curated roster of characters from outside the guild, synced
against the remote source in small rate-limited batches.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from ...core.exceptions import (
    DuplicateCharacterError,
    ValidationError,
)
from ...core.protocols import RosterSourceProtocol
from ...domain.roster.models import ExternalCharacter
from ...infrastructure.cache import CacheService
from ...infrastructure.database import ExternalCharacterRepository, RetryPolicy

logger = logging.getLogger(__name__)

LIST_KEY = "external-characters"
MAX_NAME_LENGTH = 50


@dataclass
class SyncReport:
    """Outcome of one external sync."""
    total: int = 0
    updated: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def validate_name(name: Optional[str]) -> str:
    """
    Normalize a character name.

    Raises:
        ValidationError: Empty or longer than MAX_NAME_LENGTH
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Character name is required", field="name", value=name)

    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Character name must be at most {MAX_NAME_LENGTH} characters",
            field="name",
            value=name
        )
    return name


class ExternalCharacterTracker:
    """Add, remove, flag, list and sync external characters."""

    def __init__(
        self,
        source: RosterSourceProtocol,
        repository: ExternalCharacterRepository,
        cache: CacheService,
        retry_policy: Optional[RetryPolicy] = None,
        batch_size: int = 3,
        call_delay: float = 1.0,
        batch_delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize tracker.

        Args:
            source: Remote roster source
            repository: External character store
            cache: Cache tiers
            retry_policy: Policy wrapping every store write
            batch_size: Characters fetched concurrently during sync
            call_delay: Delay before each call inside a batch, in seconds
            batch_delay: Delay between batches, in seconds
            sleep: Async sleep, replaceable in tests
        """
        self.source = source
        self.repository = repository
        self.cache = cache
        self.retry_policy = retry_policy or RetryPolicy()
        self.batch_size = batch_size
        self.call_delay = call_delay
        self.batch_delay = batch_delay
        self._sleep = sleep

    async def add(self, name: str) -> ExternalCharacter:
        """
        Start tracking a character.

        Raises:
            ValidationError: Invalid name
            DuplicateCharacterError: Already tracked
            NotFoundError: Character does not exist remotely
        """
        name = validate_name(name)

        if await self.repository.exists(name):
            raise DuplicateCharacterError(name)

        character = await self.source.fetch_character(name)
        if character.name != name and await self.repository.exists(character.name):
            raise DuplicateCharacterError(character.name)

        await self.retry_policy.run(self.repository.create, character)
        self.cache.invalidate_external()

        logger.info(f"External character {character.name} added")
        return character

    async def remove(self, name: str) -> None:
        name = validate_name(name)
        await self.retry_policy.run(self.repository.delete, name)
        self.cache.invalidate_external()
        logger.info(f"External character {name} removed")

    async def mark_exited(self, name: str) -> None:
        name = validate_name(name)
        await self.retry_policy.run(self.repository.set_exited, name, True)
        self.cache.invalidate_external()

    async def unmark_exited(self, name: str) -> None:
        name = validate_name(name)
        await self.retry_policy.run(self.repository.set_exited, name, False)
        self.cache.invalidate_external()

    async def list(self) -> List[ExternalCharacter]:
        """Tracked characters ordered by name."""
        cached = self.cache.external.get(LIST_KEY)
        if cached is not None:
            return cached

        characters = await self.repository.list_characters()
        self.cache.external.set(LIST_KEY, characters)
        return characters

    async def _sync_one(self, name: str, report: SyncReport) -> None:
        await self._sleep(self.call_delay)
        try:
            character = await self.source.fetch_character(name)
            # Keep the stored name; the remote may normalize its case
            character = character.model_copy(update={"name": name})
            await self.retry_policy.run(self.repository.update_from_remote, character)
        except Exception as e:
            logger.error(f"Error updating character {name}: {e}")
            report.failed.append(name)
            return

        report.updated.append(name)

    async def sync(self) -> SyncReport:
        """
        Refresh every tracked character from the remote source.

        Characters in one batch are fetched concurrently and batches run
        one after another. A failing character is logged and skipped.
        """
        characters = await self.repository.list_characters()
        names = [c.name for c in characters]
        report = SyncReport(total=len(names))

        for start in range(0, len(names), self.batch_size):
            batch = names[start:start + self.batch_size]
            await asyncio.gather(*(self._sync_one(name, report) for name in batch))

            if start + self.batch_size < len(names):
                await self._sleep(self.batch_delay)

        self.cache.invalidate_external()
        logger.info(
            f"External sync finished: {len(report.updated)}/{report.total} updated, "
            f"{len(report.failed)} failed"
        )
        return report
