"""
Dependency Injection Container

Central container for managing application dependencies.
"""

import logging

from dependency_injector import containers, providers

from .config import ConfigLoader
from ..application.services import (
    ExternalCharacterTracker,
    GuildService,
    RosterPoller,
    RosterReconciler,
)
from ..infrastructure.api import TibiaDataClient
from ..infrastructure.cache import CacheService
from ..infrastructure.database import (
    DatabaseConnection,
    ExternalCharacterRepository,
    MemberRepository,
    MessageRepository,
    RetryPolicy,
)

logger = logging.getLogger(__name__)


class Container(containers.DeclarativeContainer):
    """Main DI container for the application."""

    # Load settings
    settings = providers.Singleton(
        ConfigLoader.load_config
    )

    # Infrastructure - Cache
    cache = providers.Singleton(
        CacheService,
        config=settings.provided.cache,
    )

    # Infrastructure - Database
    database = providers.Singleton(
        DatabaseConnection.from_config,
        config=settings.provided.database,
    )

    member_repository = providers.Singleton(MemberRepository, database=database)
    message_repository = providers.Singleton(MessageRepository, database=database)
    external_repository = providers.Singleton(ExternalCharacterRepository, database=database)

    retry_policy = providers.Singleton(
        RetryPolicy,
        max_attempts=settings.provided.sync.max_attempts,
        backoff_min=settings.provided.sync.backoff_min,
        backoff_max=settings.provided.sync.backoff_max,
    )

    # Infrastructure - TibiaData API Client
    source_client = providers.Singleton(
        TibiaDataClient.from_config,
        config=settings.provided.remote,
    )

    # Services
    reconciler = providers.Singleton(
        RosterReconciler,
        store=member_repository,
        retry_policy=retry_policy,
        batch_size=settings.provided.sync.batch_size,
    )

    external_tracker = providers.Singleton(
        ExternalCharacterTracker,
        source=source_client,
        repository=external_repository,
        cache=cache,
        retry_policy=retry_policy,
        batch_size=settings.provided.sync.external_batch_size,
        call_delay=settings.provided.sync.external_call_delay,
        batch_delay=settings.provided.sync.external_batch_delay,
    )

    guild_service = providers.Singleton(
        GuildService,
        source=source_client,
        reconciler=reconciler,
        members=member_repository,
        messages=message_repository,
        cache=cache,
        external_tracker=external_tracker,
        retry_policy=retry_policy,
        level_threshold=settings.provided.sync.level_threshold,
    )

    poller = providers.Singleton(
        RosterPoller,
        guild_service=guild_service,
        external_tracker=external_tracker,
        guild_interval=settings.provided.sync.guild_interval,
        external_interval=settings.provided.sync.external_interval,
    )


async def initialize_container(container: Container) -> Container:
    """
    Open the resources held by the container.

    Args:
        container: Container to initialize

    Returns:
        Initialized container
    """
    database = container.database()
    await database.initialize()

    client = container.source_client()
    if hasattr(client, "initialize"):
        await client.initialize()

    logger.info("Container initialized")
    return container


async def shutdown_container(container: Container) -> None:
    """Close the resources held by the container."""
    client = container.source_client()
    if hasattr(client, "close"):
        await client.close()

    await container.database().shutdown()

    logger.info("Container shutdown complete")
