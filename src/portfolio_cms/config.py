# ABOUTME: Configuration module for application settings.
# ABOUTME: Uses pydantic-settings for environment variable overrides and provides cached access.

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path.home() / ".portfolio-cms"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    PORTFOLIO_CMS_ prefix (e.g., PORTFOLIO_CMS_DB_PATH).
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_CMS_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    db_path: Annotated[Path, Field(description="Path to SQLite database file")] = (
        DATA_DIR / "data.db"
    )

    database_url: Annotated[
        str | None,
        Field(description="SQLAlchemy URL of the content database, overrides db_path"),
    ] = None

    secret_key: Annotated[
        str, Field(description="Key used to sign session tokens", min_length=16)
    ] = "change-me-portfolio-cms-secret"

    session_ttl_minutes: Annotated[
        int, Field(description="Lifetime of a login session in minutes", ge=1)
    ] = 60 * 12

    sessions_file: Annotated[Path, Field(description="Path to stored sessions JSON file")] = (
        DATA_DIR / "sessions.json"
    )

    storage_dir: Annotated[Path, Field(description="Root directory of the object store")] = (
        DATA_DIR / "storage"
    )

    storage_bucket: Annotated[str, Field(description="Bucket holding uploaded images")] = (
        "portfolio"
    )

    storage_public_url: Annotated[
        str | None, Field(description="Base URL under which stored objects are served")
    ] = None

    max_upload_bytes: Annotated[int, Field(description="Largest accepted upload", ge=1)] = (
        5 * 1024 * 1024
    )

    refetch_debounce_seconds: Annotated[
        float, Field(description="Delay that coalesces change notifications", ge=0)
    ] = 1.0

    feed_poll_seconds: Annotated[
        float, Field(description="Interval between change feed polls", gt=0)
    ] = 1.0

    change_log_retention_hours: Annotated[
        float, Field(description="Age after which change feed entries are pruned", gt=0)
    ] = 24.0

    github_api_url: Annotated[str, Field(description="GitHub REST API base URL")] = (
        "https://api.github.com"
    )

    github_token: Annotated[
        str | None, Field(description="Optional GitHub token for higher rate limits")
    ] = None

    log_level: Annotated[str, Field(description="Logging level for the CLI")] = "WARNING"

    def get_database_url(self) -> str:
        """Return the database URL, falling back to the SQLite file at db_path."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.db_path}"

    def get_storage_public_url(self) -> str:
        """Return the base URL for stored objects."""
        if self.storage_public_url:
            return self.storage_public_url.rstrip("/")
        return self.storage_dir.resolve().as_uri()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings.

    Returns a cached Settings instance. Use get_settings.cache_clear()
    to clear the cache if needed.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def ensure_data_dir() -> Path:
    """Ensure the data directory exists.

    Creates the directory containing the database file if it doesn't exist.

    Returns:
        Path to the data directory.
    """
    settings = get_settings()
    data_dir = settings.db_path.parent
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
