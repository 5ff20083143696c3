"""
Roster Reconciler

Merges a remote roster snapshot into the persistent member store.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from ...core.exceptions import PersistenceContentionError, ReconciliationError
from ...core.protocols import MemberStoreProtocol
from ...domain.roster.models import ONLINE, GuildMember
from ...infrastructure.database.retry import RetryPolicy
from ...utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation run."""
    batches: int = 0
    inserted: int = 0
    updated: int = 0
    went_offline: int = 0
    exited_reset: int = 0


def chunked(items: Sequence[Any], size: int) -> List[Sequence[Any]]:
    """Split a sequence into consecutive slices of at most size items."""
    return [items[i:i + size] for i in range(0, len(items), size)]


class RosterReconciler:
    """
    Applies remote snapshots to the member store.

    The store is written in fixed-size batches, one transaction each, one
    after another. A batch that cannot be committed aborts the run, and
    the batches before it stay committed.
    """

    def __init__(
        self,
        store: MemberStoreProtocol,
        retry_policy: Optional[RetryPolicy] = None,
        batch_size: int = 5,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize reconciler.

        Args:
            store: Persistent member store
            retry_policy: Policy wrapping every store write
            batch_size: Members per transaction
            clock: Source of the last-seen timestamp
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self.store = store
        self.retry_policy = retry_policy or RetryPolicy()
        self.batch_size = batch_size
        self.clock = clock

    def build_row(
        self,
        member: GuildMember,
        existing: Optional[GuildMember],
        now: datetime
    ) -> Dict[str, Any]:
        """
        Column values for one member.

        Level, vocation and status always come from the remote member and
        the exited flag is carried over. last_seen is stamped when a
        member comes online, kept while they stay online and cleared when
        they are offline.
        """
        if member.status == ONLINE:
            came_online = existing is None or existing.status != ONLINE
            last_seen = now if came_online else existing.last_seen
        else:
            last_seen = None

        return {
            "name": member.name,
            "level": member.level,
            "vocation": member.vocation,
            "status": member.status,
            "last_seen": last_seen,
            "is_exited": existing.is_exited if existing else False,
        }

    async def reconcile(self, remote_members: Sequence[GuildMember]) -> ReconcileReport:
        """
        Merge a snapshot into the store.

        Args:
            remote_members: Members of a freshly fetched snapshot

        Returns:
            Counts describing what changed

        Raises:
            ReconciliationError: A write failed after every retry
        """
        report = ReconcileReport()

        try:
            persisted = await self.store.load_all()
        except SQLAlchemyError as e:
            raise ReconciliationError(
                f"Failed to load persisted members: {e}",
                original_exception=e
            ) from e

        remote_names = {m.name for m in remote_members}

        # Exited members missing from the live roster have their flag reset
        stale_exited = [
            name for name, record in persisted.items()
            if record.is_exited and name not in remote_names
        ]
        if stale_exited:
            report.exited_reset = await self._write(
                self.store.clear_exited, stale_exited, batch_index=None
            )
            logger.info(f"Reset exited flag for {report.exited_reset} absent members")

        now = self.clock()
        for index, batch in enumerate(chunked(list(remote_members), self.batch_size)):
            rows = []
            went_offline = []
            for member in batch:
                existing = persisted.get(member.name)
                rows.append(self.build_row(member, existing, now))

                if member.status != ONLINE:
                    went_offline.append(member.name)

                if existing is None:
                    report.inserted += 1
                else:
                    report.updated += 1

            await self._write(
                self.store.apply_batch, rows, went_offline, batch_index=index
            )
            report.batches += 1
            report.went_offline += len(went_offline)

        logger.info(
            f"Reconciled {len(remote_members)} members in {report.batches} batches "
            f"({report.inserted} new, {report.updated} updated)"
        )
        return report

    async def _write(self, operation, *args, batch_index: Optional[int]):
        try:
            return await self.retry_policy.run(operation, *args)
        except PersistenceContentionError as e:
            logger.error(f"Reconciliation batch {batch_index} abandoned: {e.message}")
            raise ReconciliationError(
                f"Batch {batch_index} abandoned after {self.retry_policy.max_attempts} attempts",
                batch_index=batch_index,
                attempts=self.retry_policy.max_attempts,
                original_exception=e
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Reconciliation batch {batch_index} failed: {e}")
            raise ReconciliationError(
                f"Batch {batch_index} failed: {e}",
                batch_index=batch_index,
                original_exception=e
            ) from e
