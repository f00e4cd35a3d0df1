"""
Runtime settings for the squid log daemon.

Uses Pydantic Settings to load environment variables for logging, driver
timeouts and input decoding. Connection identity (host, database, table,
user, password) is not configured here: it arrives as the daemon's single
command-line argument and is resolved by `squid_log_daemon.resolver`.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database driver
    db_port: int = Field(5432, alias="DB_PORT")
    db_connect_timeout: int = Field(10, alias="DB_CONNECT_TIMEOUT")
    db_statement_timeout_ms: int = Field(0, alias="DB_STATEMENT_TIMEOUT_MS")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    input_encoding: str = Field("utf-8", alias="INPUT_ENCODING")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
