"""
Application configuration with environment-driven settings.
"""

from functools import lru_cache
from typing import Literal
from urllib.parse import quote

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "voice-resolver"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP server
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=8081, ge=1, le=65535, description="HTTP port")

    # Database
    db_host: str = Field(default="localhost", description="PostgreSQL host")
    db_port: int = Field(default=5432, ge=1, le=65535, description="PostgreSQL port")
    db_user: str = Field(default="xdialcore", description="PostgreSQL user")
    db_password: str = Field(default="xdialcore", description="PostgreSQL password")
    db_name: str = Field(default="xdialcore", description="PostgreSQL database name")
    db_pool_size: int = Field(default=5, ge=1, description="Connection pool size")
    db_max_overflow: int = Field(
        default=10,
        ge=0,
        description="Connections allowed above the pool size under load",
    )
    db_ping_on_startup: bool = Field(
        default=True,
        description="Run SELECT 1 at startup and refuse to serve if it fails.",
    )

    # Resolution
    voice_selection_mode: Literal["application", "database"] = Field(
        default="application",
        description=(
            "Where the random active voice is picked: 'application' fetches every "
            "eligible row and picks uniformly in-process, 'database' uses "
            "ORDER BY random() LIMIT 1."
        ),
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return str(v).strip().upper()

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the asyncpg driver."""
        user = quote(self.db_user, safe="")
        password = quote(self.db_password, safe="")
        return (
            f"postgresql+asyncpg://{user}:{password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def database_target(self) -> str:
        """Password-free description of the database, for logs."""
        return f"{self.db_user}@{self.db_host}/{self.db_name}"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
