"""
Client configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Level names the original server accepted, mapped onto stdlib logging levels
LOG_LEVEL_ALIASES = {
    "WARN": "WARNING",
    "TRACE": "DEBUG",
}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "10kbclub"

    # Server endpoints
    BASE_URL: str = "http://localhost:3003"
    ID_PATH: str = "/id/"
    VOTE_PATH: str = "/vote/"
    VOTES_PATH: str = "/votes/"

    # No timeout unless the environment asks for one
    HTTP_TIMEOUT_SECONDS: float | None = None

    # Local storage (stands in for the browser profile's localStorage)
    STORAGE_PATH: Path = Path.home() / ".10kbclub" / "local_storage.json"
    VOTER_ID_KEY: str = "10kb_voter_id"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths carry their own leading slash."""
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise the log level and reject unknown names."""
        level = v.strip().upper()
        level = LOG_LEVEL_ALIASES.get(level, level)
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
