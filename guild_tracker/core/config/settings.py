"""
Application Settings

Configuration classes using Pydantic for validation.
"""

from typing import Dict

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv()


class RemoteAPIConfig(BaseSettings):
    """Remote roster source (TibiaData) settings."""

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="https://api.tibiadata.com/v4",
        description="Remote API base URL"
    )
    guild_name: str = Field(
        default="Felizes Para Sempre",
        description="Guild tracked by the roster sync"
    )
    world: str = Field(
        default="Penumbra",
        description="World used to resolve a character's online status"
    )
    timeout: float = Field(
        default=10.0,
        description="Hard deadline for one remote call in seconds"
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeout must be positive."""
        if v <= 0:
            raise ValueError(f"Invalid timeout: {v}. Must be positive")
        return v


class DatabaseConfig(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    url: str = Field(
        default="sqlite+aiosqlite:///guild_tracker.db",
        validation_alias="DATABASE_URL",
        description="Database connection URL"
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements"
    )
    pool_size: int = Field(
        default=20,
        description="Connection pool size"
    )
    max_overflow: int = Field(
        default=0,
        description="Max overflow connections"
    )

    @field_validator("url")
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Heroku postgres URL format."""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v


class CacheConfig(BaseSettings):
    """TTL settings for the tiered cache, in seconds."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    raw_ttl: int = Field(default=60, description="Raw guild snapshot TTL")
    analysis_ttl: int = Field(default=15, description="Guild analysis TTL")
    external_ttl: int = Field(default=30, description="External character list TTL")
    combined_ttl: int = Field(default=15, description="Combined analysis TTL")

    @field_validator("raw_ttl", "analysis_ttl", "external_ttl", "combined_ttl")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """TTLs must be positive."""
        if v <= 0:
            raise ValueError(f"Invalid TTL: {v}. Must be positive")
        return v

    def as_dict(self) -> Dict[str, int]:
        """TTL per cache tier."""
        return {
            "raw": self.raw_ttl,
            "analysis": self.analysis_ttl,
            "external": self.external_ttl,
            "combined": self.combined_ttl,
        }


class SyncConfig(BaseSettings):
    """Reconciliation and external sync settings."""

    model_config = SettingsConfigDict(
        env_prefix="SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    batch_size: int = Field(
        default=5,
        description="Members per reconciliation transaction"
    )
    max_attempts: int = Field(
        default=3,
        description="Attempts per transaction on contention"
    )
    backoff_min: float = Field(
        default=0.1,
        description="Lower bound of the jittered retry delay"
    )
    backoff_max: float = Field(
        default=1.1,
        description="Upper bound of the jittered retry delay"
    )
    level_threshold: int = Field(
        default=400,
        description="Level splitting the analysis into above/below"
    )

    # External tracker
    external_batch_size: int = Field(default=3)
    external_call_delay: float = Field(default=1.0)
    external_batch_delay: float = Field(default=2.0)

    # Background poller, 0 disables
    guild_interval: int = Field(default=60)
    external_interval: int = Field(default=600)

    @field_validator("batch_size", "max_attempts", "external_batch_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Batch sizes and attempts must be at least 1."""
        if v < 1:
            raise ValueError(f"Invalid value: {v}. Must be >= 1")
        return v


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3001, validation_alias="PORT")
    api_key: str = Field(default="", validation_alias="API_KEY")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Guild Tracker API")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    remote: RemoteAPIConfig = Field(default_factory=RemoteAPIConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
