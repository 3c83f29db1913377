"""Application settings loaded from environment / .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ──────────────────────────────────────────
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "saas"
    # Full SQLAlchemy URL; overrides the db_* parts when set
    database_url: str | None = None
    db_pool_size: int = 20
    db_max_overflow: int = 10

    # ── HTTP listener ─────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: str = "*"

    # ── Security ──────────────────────────────────────────
    password_hash_rounds: int = 10  # bcrypt cost factor
    approval_policy: str = "open"  # "open" | "company_admin"

    # ── Logging ───────────────────────────────────────────
    log_level: str = "INFO"

    @property
    def sqlalchemy_url(self) -> str | URL:
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
