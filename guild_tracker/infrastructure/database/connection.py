"""
Database Connection

Async engine and transactional sessions for the member store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker
)

from ...core.config import DatabaseConfig
from ...core.models import Base

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Owns the engine of one database and hands out sessions."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0
    ):
        """
        Args:
            database_url: SQLAlchemy async URL
            echo: Log every SQL statement
            pool_size: Pool size, unused on SQLite
            max_overflow: Connections allowed above pool_size, unused on SQLite
        """
        self.database_url = database_url
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self._engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker] = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "DatabaseConnection":
        return cls(
            database_url=config.url,
            echo=config.echo,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def _engine_options(self) -> Dict[str, Any]:
        if self.is_sqlite:
            return {"echo": self.echo}

        return {
            "echo": self.echo,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }

    async def initialize(self) -> None:
        """Open the engine, check it answers and create missing tables."""
        if self._engine is not None:
            return

        engine = create_async_engine(self.database_url, **self._engine_options())
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Cannot reach database: {e}")
            await engine.dispose()
            raise

        self._engine = engine
        self._sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        logger.info(f"Connected to {engine.dialect.name} database")

        await self.create_tables()

    async def create_tables(self) -> None:
        if self._engine is None:
            raise RuntimeError("Database not initialized")

        # Registers the roster tables on Base.metadata
        from ...domain.roster import entities  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def shutdown(self) -> None:
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("Database connection closed")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        One transaction: committed when the block exits normally, rolled
        back when it raises.
        """
        if self._sessions is None:
            raise RuntimeError("Database not initialized")

        async with self._sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return True

    @property
    def dialect_name(self) -> str:
        if self._engine is None:
            raise RuntimeError("Database not initialized")
        return self._engine.dialect.name
