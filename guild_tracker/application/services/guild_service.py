"""
Guild Service

Read-through orchestration: fetch, reconcile, enrich, analyse, cache.
"""

import logging
from typing import Dict, List, Optional

from .external_tracker import ExternalCharacterTracker
from .reconciler import RosterReconciler
from ...core.exceptions import RemoteSourceError, ValidationError
from ...core.protocols import RosterSourceProtocol
from ...domain.roster import analysis
from ...domain.roster.models import (
    CombinedAnalysis,
    Guild,
    GuildAnalysis,
    GuildMember,
    MemberMessage,
    RosterStatistics,
)
from ...infrastructure.cache import CacheService
from ...infrastructure.database import MemberRepository, MessageRepository, RetryPolicy

logger = logging.getLogger(__name__)

GUILD_KEY = "guild"
ANALYSIS_KEY = "guild-analysis"
COMBINED_KEY = "combined-analysis"

MAX_MESSAGE_LENGTH = 50


class GuildService:
    """Serves the guild roster and the analyses derived from it."""

    def __init__(
        self,
        source: RosterSourceProtocol,
        reconciler: RosterReconciler,
        members: MemberRepository,
        messages: MessageRepository,
        cache: CacheService,
        external_tracker: ExternalCharacterTracker,
        retry_policy: Optional[RetryPolicy] = None,
        level_threshold: int = analysis.DEFAULT_LEVEL_THRESHOLD
    ):
        self.source = source
        self.reconciler = reconciler
        self.members = members
        self.messages = messages
        self.cache = cache
        self.external_tracker = external_tracker
        self.retry_policy = retry_policy or RetryPolicy()
        self.level_threshold = level_threshold

        # Last successfully reconciled snapshot, served when the source is down
        self._last_good: Optional[Guild] = None

    async def refresh_guild(self) -> Guild:
        """
        Fetch a snapshot, reconcile it and store it in the raw cache.

        Raises:
            RemoteFetchError: Fetch or decode failed, nothing was written
            RemoteTimeoutError: Fetch missed its deadline, nothing was written
            ReconciliationError: A batch could not be committed
        """
        guild = await self.source.fetch_guild()
        await self.reconciler.reconcile(guild.members)

        self.cache.raw.set(GUILD_KEY, guild)
        self.cache.invalidate_analysis()
        self._last_good = guild
        return guild

    async def get_guild(self) -> Guild:
        """Reconciled snapshot from the raw cache, refreshed on a miss."""
        cached = self.cache.raw.get(GUILD_KEY)
        if cached is not None:
            return cached

        try:
            return await self.refresh_guild()
        except RemoteSourceError as e:
            if self._last_good is None:
                raise
            logger.warning(f"Roster fetch failed, serving last good snapshot: {e.message}")
            return self._last_good

    async def enrich(self, guild: Guild) -> Guild:
        """Copy of the snapshot carrying persisted last-seen and exited state."""
        persisted = await self.members.load_all()

        members: List[GuildMember] = []
        for member in guild.members:
            record = persisted.get(member.name)
            if record is None:
                members.append(member)
                continue
            members.append(member.model_copy(update={
                "last_seen": record.last_seen,
                "is_exited": record.is_exited,
            }))

        return guild.model_copy(update={"members": members})

    async def get_full_analysis(self) -> GuildAnalysis:
        cached = self.cache.analysis.get(ANALYSIS_KEY)
        if cached is not None:
            return cached

        guild = await self.enrich(await self.get_guild())
        result = analysis.full_analysis(guild, self.level_threshold)
        self.cache.analysis.set(ANALYSIS_KEY, result)
        return result

    async def force_refresh(self) -> GuildAnalysis:
        """Flush every cache tier and recompute the analysis."""
        self.cache.flush_all()
        return await self.get_full_analysis()

    async def get_combined_analysis(self) -> CombinedAnalysis:
        cached = self.cache.combined.get(COMBINED_KEY)
        if cached is not None:
            return cached

        guild = await self.enrich(await self.get_guild())
        externals = await self.external_tracker.list()
        result = analysis.combined_analysis(guild, externals, self.level_threshold)
        self.cache.combined.set(COMBINED_KEY, result)
        return result

    async def mark_member_exited(self, name: str) -> None:
        await self.retry_policy.run(self.members.set_exited, name, True)
        self.cache.invalidate_analysis()
        logger.info(f"Member {name} marked as exited")

    async def unmark_member_exited(self, name: str) -> None:
        await self.retry_policy.run(self.members.set_exited, name, False)
        self.cache.invalidate_analysis()
        logger.info(f"Member {name} unmarked as exited")

    async def get_statistics(self) -> RosterStatistics:
        """Statistics over every persisted member."""
        return analysis.roster_statistics(await self.members.list_members())

    async def get_messages(self) -> List[MemberMessage]:
        return await self.messages.list_messages()

    async def set_message(self, name: str, message: str) -> MemberMessage:
        """
        Create or replace a member's message.

        Raises:
            ValidationError: Empty name, empty message or message too long
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name", value=name)
        if not message:
            raise ValidationError("Message is required", field="message", value=message)
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message must be at most {MAX_MESSAGE_LENGTH} characters",
                field="message",
                value=message
            )

        return await self.retry_policy.run(self.messages.upsert, name, message)

    async def cleanup_offline_messages(self) -> int:
        """Delete messages of members persisted as offline."""
        removed = await self.retry_policy.run(self.messages.delete_for_offline_members)
        if removed:
            logger.info(f"Removed {removed} messages of offline members")
        return removed

    def cache_stats(self) -> Dict[str, Dict]:
        return self.cache.get_stats()
