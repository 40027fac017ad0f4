from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "Quorum Availability API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"
    # Keep the database at the project root so every entry point shares one file
    DATABASE_URL: str = "sqlite:///../quorum.db"
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Redis configuration (shared holiday lists between workers)
    REDIS_CACHE_URL: str = "redis://localhost:6379/1"
    HOLIDAY_CACHE_TTL: int = 7 * 24 * 3600
    HOLIDAY_LOOKUP_TIMEOUT: float = 2.0

    # Calendar defaults and query limits
    DEFAULT_TIMEZONE: str = "Europe/Paris"
    DEFAULT_SLOT_MINUTES: int = 30
    MAX_QUERY_DAYS: int = 366
    SUMMARY_WORKERS: int = 4

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: List[str] | str) -> List[str]:
        """Allow both comma-separated strings and list inputs."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
