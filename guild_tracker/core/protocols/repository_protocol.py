"""
Repository Protocol Definition

Defines the interface of the persistent member store used by the reconciler.
"""

from typing import Protocol, Dict, List, Iterable, Any

from ...domain.roster.models import GuildMember


class MemberStoreProtocol(Protocol):
    """Transactional store of guild members keyed by name."""

    async def load_all(self) -> Dict[str, GuildMember]:
        """
        Load every persisted member.

        Returns:
            Member name to persisted state
        """
        ...

    async def clear_exited(self, names: Iterable[str]) -> int:
        """
        Reset the exited flag for the given members.

        Returns:
            Number of rows changed
        """
        ...

    async def apply_batch(
        self,
        rows: List[Dict[str, Any]],
        clear_messages_for: List[str]
    ) -> None:
        """
        Upsert rows and delete messages in a single transaction.

        Args:
            rows: Column values keyed by column name, one per member
            clear_messages_for: Members whose messages are deleted
        """
        ...
