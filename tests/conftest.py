"""Pytest configuration and fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from core.config import REQUIRED_DATABASE_VARS, DatabaseConfig, get_settings
from provisioning.retry import RetryPolicy


def _sqlite_engine(db_path: Path) -> Engine:
    engine = create_engine(f"sqlite:///{db_path.as_posix()}")

    # Enable foreign key support for SQLite so ON DELETE CASCADE applies
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "timelines.db"


@pytest.fixture
def engine(db_path):
    """A SQLite engine standing in for PostgreSQL."""
    engine = _sqlite_engine(db_path)
    yield engine
    engine.dispose()


@pytest.fixture
def engine_factory(db_path) -> Callable[[DatabaseConfig], Engine]:
    """Engine factory for `provision()`; every call opens the same database file."""

    def factory(config: DatabaseConfig) -> Engine:
        return _sqlite_engine(db_path)

    return factory


@pytest.fixture
def db_config() -> DatabaseConfig:
    return DatabaseConfig(
        host="db.example.com",
        database="timelines",
        user="provisioner",
        password="s3cret",
    )


@pytest.fixture
def sleeps() -> List[float]:
    """Records the delays requested between connection attempts."""
    return []


@pytest.fixture
def fake_sleep(sleeps) -> Callable[[float], None]:
    return sleeps.append


@pytest.fixture
def fast_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=3, delay_seconds=2.0)


@pytest.fixture
def db_env(monkeypatch):
    """Populate every required database variable and reset cached settings."""
    values = {
        "VITE_AZURE_DB_HOST": "db.example.com",
        "VITE_AZURE_DB_NAME": "timelines",
        "VITE_AZURE_DB_USER": "provisioner",
        "VITE_AZURE_DB_PASSWORD": "s3cret",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    get_settings.cache_clear()
    yield values
    get_settings.cache_clear()


@pytest.fixture
def no_db_env(monkeypatch):
    """Remove every required database variable and reset cached settings."""
    for name in REQUIRED_DATABASE_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
