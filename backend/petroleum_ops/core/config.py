"""
Application configuration using Pydantic Settings.

Environment-based infrastructure switching is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = False

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./petroleum_ops.db"

    # ===========================================
    # Logging
    # ===========================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ===========================================
    # Milestone status policy
    # ===========================================
    # False: any status may be assigned from any status.
    # True: planned -> in-progress -> completed, delayed from any open state.
    STRICT_STATUS_TRANSITIONS: bool = False

    # ===========================================
    # Realtime stream
    # ===========================================
    REALTIME_KEEPALIVE_SECONDS: float = Field(default=15.0, gt=0)
    REALTIME_QUEUE_SIZE: int = Field(default=100, gt=0)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def is_local(self) -> bool:
        """Check if running against the local SQLite store."""
        return self.ENVIRONMENT in ("local", "test")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
