"""Runtime settings, read from ``LENDING_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LENDING_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///lending.db"
    sql_echo: bool = False
    # Max wait for a row lock: PostgreSQL lock_timeout, SQLite busy timeout.
    lock_timeout_ms: int = 5000
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
