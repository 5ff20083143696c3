"""
Roster Poller

Background loops that keep the member store and the external roster
fresh while the server runs.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List

from .external_tracker import ExternalCharacterTracker
from .guild_service import GuildService

logger = logging.getLogger(__name__)


class RosterPoller:
    """Periodically refreshes the guild snapshot and syncs external characters."""

    def __init__(
        self,
        guild_service: GuildService,
        external_tracker: ExternalCharacterTracker,
        guild_interval: float = 60,
        external_interval: float = 600
    ):
        """
        Initialize poller.

        Args:
            guild_service: Service whose snapshot is refreshed
            external_tracker: Tracker whose characters are synced
            guild_interval: Seconds between guild refreshes, 0 disables
            external_interval: Seconds between external syncs, 0 disables
        """
        self.guild_service = guild_service
        self.external_tracker = external_tracker
        self.guild_interval = guild_interval
        self.external_interval = external_interval

        self.running = False
        self._tasks: List[asyncio.Task] = []

    async def refresh_guild_once(self) -> None:
        await self.guild_service.refresh_guild()

    async def sync_external_once(self) -> None:
        await self.external_tracker.sync()

    async def _loop(
        self,
        label: str,
        interval: float,
        job: Callable[[], Awaitable[None]]
    ) -> None:
        while self.running:
            await asyncio.sleep(interval)
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Scheduled {label} failed: {e}")

    def start(self) -> None:
        """Start the enabled loops."""
        if self.running:
            logger.warning("Roster poller already running")
            return

        self.running = True
        loops = [
            ("guild refresh", self.guild_interval, self.refresh_guild_once),
            ("external sync", self.external_interval, self.sync_external_once),
        ]
        for label, interval, job in loops:
            if interval and interval > 0:
                self._tasks.append(asyncio.create_task(self._loop(label, interval, job)))
                logger.info(f"Scheduled {label} every {interval}s")
            else:
                logger.info(f"Scheduled {label} disabled")

    async def stop(self) -> None:
        """Cancel the loops and wait for them to finish."""
        self.running = False

        for task in self._tasks:
            if not task.done():
                task.cancel()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        self._tasks = []
        logger.info("Roster poller stopped")

    @property
    def active_loops(self) -> int:
        return sum(1 for task in self._tasks if not task.done())
