"""
Roster Entity Models

Tables backing the persistent member store.
"""

from sqlalchemy import Column, String, Integer, DateTime, Boolean, Index

from ...core.models import TimestampedModel
from ...utils.datetime_utils import utc_now


class GuildMemberRecord(TimestampedModel):
    """Persisted guild member, keyed by name."""

    __tablename__ = "guild_members"

    name = Column(String(50), primary_key=True)
    level = Column(Integer, nullable=False, default=1)
    vocation = Column(String(30), nullable=False)
    status = Column(String(10), nullable=False, default="offline")
    last_seen = Column(DateTime, nullable=True)
    is_exited = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('idx_member_status', 'status'),
        Index('idx_member_exited', 'is_exited'),
    )


class MemberMessageRecord(TimestampedModel):
    """Free-text annotation keyed by member name."""

    __tablename__ = "member_messages"

    name = Column(String(50), primary_key=True)
    message = Column(String(50), nullable=False)


class ExternalCharacterRecord(TimestampedModel):
    """Character tracked from outside the guild."""

    __tablename__ = "external_characters"

    name = Column(String(50), primary_key=True)
    level = Column(Integer, nullable=False, default=1)
    vocation = Column(String(30), nullable=False)
    status = Column(String(10), nullable=False, default="offline")
    last_seen = Column(DateTime, nullable=True)
    is_exited = Column(Boolean, nullable=False, default=False)
    is_external = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
