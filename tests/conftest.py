# ABOUTME: Shared pytest fixtures for portfolio-cms tests.
# ABOUTME: Provides temporary databases, change feeds, notifiers and an isolated settings env.

import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest import mock

import pytest

from portfolio_cms.config import get_settings
from portfolio_cms.database import ChangeFeed, DatabaseService
from portfolio_cms.sync import Notifier


@pytest.fixture
def temp_db_path() -> Path:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        return Path(f.name)


@pytest.fixture
def db_service(temp_db_path: Path) -> DatabaseService:
    """Create a DatabaseService instance with a temporary database."""
    service = DatabaseService(db_path=temp_db_path)
    service.init_db()
    return service


@pytest.fixture
def feed(db_service: DatabaseService) -> ChangeFeed:
    """Create a change feed polled manually by the test."""
    return ChangeFeed(db_service, poll_interval=0.05)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def temp_settings_env() -> Generator[str, None, None]:
    """Point every setting that touches disk at a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        env_vars = {
            "PORTFOLIO_CMS_DB_PATH": str(Path(tmpdir) / "data.db"),
            "PORTFOLIO_CMS_SESSIONS_FILE": str(Path(tmpdir) / "sessions.json"),
            "PORTFOLIO_CMS_STORAGE_DIR": str(Path(tmpdir) / "storage"),
            "PORTFOLIO_CMS_SECRET_KEY": "test-secret-key-for-sessions",
            "PORTFOLIO_CMS_REFETCH_DEBOUNCE_SECONDS": "0.05",
        }
        with mock.patch.dict(os.environ, env_vars, clear=False):
            get_settings.cache_clear()
            yield tmpdir
        get_settings.cache_clear()
