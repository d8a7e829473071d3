"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Connection strings come from environment variables or .env (never hardcoded in routes)
    - get_settings() is cached (lru_cache): single instance per process
    - Nothing here decides whether stores are connected; create_app() receives
      explicit store handles or builds them from these values

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults target a local docker-compose MongoDB and a SQLite file for items
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Document store (users)
    mongo_uri: str = "mongodb://localhost:27017/demo"
    mongo_database: str | None = None
    mongo_timeout_ms: int = Field(5000, ge=1)

    # Relational store (items)
    database_url: str = "sqlite+aiosqlite:///./dev.sqlite3"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_create_schema: bool = False

    # HTTP
    host: str = "0.0.0.0"
    port: int = 3000
    list_limit: int = Field(100, ge=1, le=1000)
    request_timeout_seconds: float = Field(10.0, gt=0)
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
