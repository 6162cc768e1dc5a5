"""
Configuration settings for tablegen.

Uses Pydantic Settings to load environment variables for database connections,
logging, and generation defaults (chunking, value ranges, row source).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("tablegen", alias="DB_NAME")
    db_statement_timeout_ms: int = Field(0, alias="DB_STATEMENT_TIMEOUT_MS", ge=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Generation defaults
    insert_chunk_size: int = Field(1_000_000, alias="TABLEGEN_INSERT_CHUNK_SIZE", gt=0)
    row_source: Literal["series", "cross_join"] = Field("series", alias="TABLEGEN_ROW_SOURCE")
    temporal_span_seconds: int = Field(
        100_000_000, alias="TABLEGEN_TEMPORAL_SPAN_SECONDS", gt=0
    )
    temporal_key_step_seconds: int = Field(1, alias="TABLEGEN_TEMPORAL_KEY_STEP_SECONDS", gt=0)
    max_string_size: int = Field(20, alias="TABLEGEN_MAX_STRING_SIZE", ge=0)

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
