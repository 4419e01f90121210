"""Application settings.

Values are read from ``TASKTRACKER_*`` environment variables, or from a local
``.env`` file when present.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the API server and the task client."""

    model_config = SettingsConfigDict(
        env_prefix="TASKTRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Task Tracker"
    database_path: Path = Path("tasks.db")

    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"
    log_dir: Path | None = None

    # Base URL the client uses to reach the API
    api_url: str = "http://localhost:3000"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
