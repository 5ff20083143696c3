"""
Configuration Loader

Loads Settings once per process and checks the values that pydantic
cannot check on its own.
"""

import os
import logging
from typing import Optional, Dict, Any

from pydantic import ValidationError as PydanticValidationError

from .settings import Settings
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_DRIVERS = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


class ConfigLoader:
    """Process-wide holder of the loaded Settings."""

    _settings: Optional[Settings] = None

    @classmethod
    def load_config(cls, overrides: Optional[Dict[str, Any]] = None) -> Settings:
        """
        Read settings from the environment and .env the first time; later
        calls hand back the same instance.

        Args:
            overrides: Environment variables set before reading
        """
        if cls._settings is None:
            for key, value in (overrides or {}).items():
                os.environ[key.upper()] = str(value)

            try:
                settings = Settings()
            except PydanticValidationError as e:
                logger.error(f"Settings rejected: {e}")
                raise ConfigurationError(
                    "Invalid configuration",
                    details={"errors": e.errors(include_url=False)}
                ) from e

            cls._settings = settings
            cls._log_summary(settings)

        return cls._settings

    @classmethod
    def get_settings(cls) -> Settings:
        """
        Raises:
            ConfigurationError: load_config() has not run yet
        """
        if cls._settings is None:
            raise ConfigurationError("Settings requested before load_config()")
        return cls._settings

    @classmethod
    def reload_config(cls, overrides: Optional[Dict[str, Any]] = None) -> Settings:
        cls._settings = None
        return cls.load_config(overrides)

    @staticmethod
    def _log_summary(settings: Settings) -> None:
        # No secrets here: the API key and database URL stay out of the log
        logger.info(f"{settings.app_name} v{settings.app_version} (debug={settings.debug})")
        logger.info(f"Listening on {settings.server.host}:{settings.server.port}")
        logger.info(f"Tracking {settings.remote.guild_name} on {settings.remote.world}")
        logger.info(f"Cache TTLs: {settings.cache.as_dict()}")
        logger.info(
            f"Sync batches of {settings.sync.batch_size}, "
            f"{settings.sync.max_attempts} attempts each"
        )

    @classmethod
    def validate_config(cls) -> bool:
        """
        Cross-field checks on the loaded settings.

        Returns:
            False when the settings cannot work together
        """
        settings = cls._settings
        if settings is None:
            logger.error("validate_config() called before load_config()")
            return False

        if not settings.server.api_key:
            logger.warning("API_KEY is not set, protected routes will reject every request")

        if not settings.database.url.startswith(SUPPORTED_DRIVERS):
            logger.error(
                f"DATABASE_URL must use one of {', '.join(SUPPORTED_DRIVERS)}"
            )
            return False

        if settings.sync.backoff_min > settings.sync.backoff_max:
            logger.error("SYNC_BACKOFF_MIN must not exceed SYNC_BACKOFF_MAX")
            return False

        return True
