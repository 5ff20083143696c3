"""
Base Model Classes

Provides base classes and mixins for all database models.
"""

from sqlalchemy import Column, DateTime, MetaData
from sqlalchemy.orm import declarative_base

from ...utils.datetime_utils import utc_now

# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

Base = declarative_base(metadata=MetaData(naming_convention=convention))


class NamedModel(Base):
    """Base model keyed by a character name."""

    __abstract__ = True

    def __repr__(self) -> str:
        """String representation."""
        return f"<{self.__class__.__name__}(name={getattr(self, 'name', None)})>"


class TimestampedModel(NamedModel):
    """Mixin for models with an update timestamp."""

    __abstract__ = True

    updated_at = Column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )
