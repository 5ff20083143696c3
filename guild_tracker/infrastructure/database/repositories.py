"""
Repository Implementations

Data access for members, messages and external characters.
Every public method runs in its own transaction.
"""

import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .connection import DatabaseConnection
from ...core.exceptions import DuplicateCharacterError, NotFoundError
from ...core.models import NamedModel
from ...domain.roster.entities import (
    ExternalCharacterRecord,
    GuildMemberRecord,
    MemberMessageRecord,
)
from ...domain.roster.models import (
    OFFLINE,
    ExternalCharacter,
    GuildMember,
    MemberMessage,
)
from ...utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=NamedModel)


class BaseRepository(Generic[T]):
    """Base repository for name-keyed SQLAlchemy models."""

    resource_name = "Record"

    def __init__(self, model: Type[T], database: DatabaseConnection):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            database: Connection providing transactional sessions
        """
        self.model = model
        self.database = database

    async def get(self, name: str) -> Optional[T]:
        """Retrieve an entity by name."""
        async with self.database.get_session() as session:
            return await session.get(self.model, name)

    async def exists(self, name: str) -> bool:
        """Check if an entity exists."""
        return await self.get(name) is not None

    async def list_records(self) -> List[T]:
        """All entities ordered by name."""
        async with self.database.get_session() as session:
            result = await session.execute(
                select(self.model).order_by(self.model.name)
            )
            return list(result.scalars().all())

    async def delete(self, name: str) -> None:
        """
        Delete an entity by name.

        Raises:
            NotFoundError: No entity with that name
        """
        async with self.database.get_session() as session:
            result = await session.execute(
                delete(self.model).where(self.model.name == name)
            )
            if result.rowcount == 0:
                raise NotFoundError(self.resource_name, name)

    async def set_exited(self, name: str, is_exited: bool) -> None:
        """
        Set or clear the exited flag.

        Raises:
            NotFoundError: No entity with that name
        """
        async with self.database.get_session() as session:
            result = await session.execute(
                update(self.model)
                .where(self.model.name == name)
                .values(is_exited=is_exited, updated_at=utc_now())
            )
            if result.rowcount == 0:
                raise NotFoundError(self.resource_name, name)

    async def _upsert(
        self,
        session: AsyncSession,
        rows: List[Dict[str, Any]]
    ) -> None:
        """Insert-or-update rows keyed by name."""
        if not rows:
            return

        # Only SQLite and PostgreSQL pass ConfigLoader.validate_config
        if self.database.dialect_name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert

        stmt = insert(self.model).values(rows)
        update_columns = {
            column: stmt.excluded[column]
            for column in rows[0]
            if column != "name"
        }
        await session.execute(
            stmt.on_conflict_do_update(
                index_elements=["name"],
                set_=update_columns
            )
        )


class MemberRepository(BaseRepository[GuildMemberRecord]):
    """Persistent guild member store."""

    resource_name = "Member"

    def __init__(self, database: DatabaseConnection):
        super().__init__(GuildMemberRecord, database)

    async def load_all(self) -> Dict[str, GuildMember]:
        """Every persisted member keyed by name."""
        records = await self.list_records()
        return {
            record.name: GuildMember.model_validate(record)
            for record in records
        }

    async def list_members(self) -> List[GuildMember]:
        """Every persisted member ordered by name."""
        records = await self.list_records()
        return [GuildMember.model_validate(record) for record in records]

    async def clear_exited(self, names: Iterable[str]) -> int:
        """Reset the exited flag for the given members."""
        names = list(names)
        if not names:
            return 0

        async with self.database.get_session() as session:
            result = await session.execute(
                update(GuildMemberRecord)
                .where(GuildMemberRecord.name.in_(names))
                .where(GuildMemberRecord.is_exited.is_(True))
                .values(is_exited=False, updated_at=utc_now())
            )
            return result.rowcount

    async def apply_batch(
        self,
        rows: List[Dict[str, Any]],
        clear_messages_for: List[str]
    ) -> None:
        """Upsert a batch of members and delete messages in one transaction."""
        stamped = [{**row, "updated_at": utc_now()} for row in rows]

        async with self.database.get_session() as session:
            await self._upsert(session, stamped)

            if clear_messages_for:
                await session.execute(
                    delete(MemberMessageRecord)
                    .where(MemberMessageRecord.name.in_(clear_messages_for))
                )


class MessageRepository(BaseRepository[MemberMessageRecord]):
    """Member message store."""

    resource_name = "Message"

    def __init__(self, database: DatabaseConnection):
        super().__init__(MemberMessageRecord, database)

    async def list_messages(self) -> List[MemberMessage]:
        records = await self.list_records()
        return [MemberMessage.model_validate(record) for record in records]

    async def upsert(self, name: str, message: str) -> MemberMessage:
        """Create or replace the message for a member."""
        async with self.database.get_session() as session:
            await self._upsert(
                session,
                [{"name": name, "message": message, "updated_at": utc_now()}]
            )

        record = await self.get(name)
        return MemberMessage.model_validate(record)

    async def delete_for_offline_members(self) -> int:
        """Delete messages of members persisted as offline."""
        offline = (
            select(GuildMemberRecord.name)
            .where(GuildMemberRecord.status == OFFLINE)
        )

        async with self.database.get_session() as session:
            result = await session.execute(
                delete(MemberMessageRecord)
                .where(MemberMessageRecord.name.in_(offline))
            )
            return result.rowcount


class ExternalCharacterRepository(BaseRepository[ExternalCharacterRecord]):
    """External character store."""

    resource_name = "External character"

    def __init__(self, database: DatabaseConnection):
        super().__init__(ExternalCharacterRecord, database)

    async def list_characters(self) -> List[ExternalCharacter]:
        records = await self.list_records()
        return [ExternalCharacter.model_validate(record) for record in records]

    async def create(self, character: ExternalCharacter) -> None:
        """
        Raises:
            DuplicateCharacterError: The name was inserted concurrently
        """
        try:
            async with self.database.get_session() as session:
                session.add(ExternalCharacterRecord(
                    name=character.name,
                    level=character.level,
                    vocation=character.vocation,
                    status=character.status,
                    last_seen=character.last_seen,
                    is_exited=character.is_exited,
                    is_external=True,
                ))
        except IntegrityError as e:
            raise DuplicateCharacterError(character.name) from e

    async def update_from_remote(self, character: ExternalCharacter) -> None:
        """
        Refresh remote-owned columns. The exited flag is left alone.

        Raises:
            NotFoundError: Character is no longer tracked
        """
        async with self.database.get_session() as session:
            result = await session.execute(
                update(ExternalCharacterRecord)
                .where(ExternalCharacterRecord.name == character.name)
                .values(
                    level=character.level,
                    vocation=character.vocation,
                    status=character.status,
                    last_seen=character.last_seen,
                    updated_at=utc_now(),
                )
            )
            if result.rowcount == 0:
                raise NotFoundError(self.resource_name, character.name)
