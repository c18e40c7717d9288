"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage ("memory" keeps everything in-process, "sql" uses SQLAlchemy)
    storage_backend: str = "memory"
    database_url: str = "sqlite:///./placement_portal.db"
    sql_echo: bool = False

    # JWT Auth
    jwt_secret_key: str = "dev_secret_change_me"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 120

    # CORS (both common Vite ports)
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:5174"]

    # Demo data
    seed_demo_students: int = 0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # App
    debug: bool = False

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
