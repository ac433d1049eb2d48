"""Configuration management for mudkeep using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="MUDKEEP_",
        extra="ignore",
    )

    # Store selection
    store_backend: Literal["redis", "sql"] = Field(
        default="redis", description="Key-value backend (redis or sql)"
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_socket_timeout: float | None = Field(
        default=5.0, description="Redis socket timeout in seconds (None disables it)"
    )

    # SQL
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/mudkeep.db",
        description="SQLAlchemy async database URL for the sql backend",
    )
    debug: bool = Field(default=False, description="Echo SQL statements")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Log format (console or json)"
    )

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return Path("./data")

    @property
    def world_dir(self) -> Path:
        """Get the world data directory path."""
        return self.data_dir / "world"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
