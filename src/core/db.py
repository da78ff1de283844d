"""Database engine construction and connection helpers.

Unlike a long-running service there is no module-level engine: every
provisioning run builds its own engine from an explicit `DatabaseConfig` and
disposes of it when the run ends.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import DeclarativeBase

from .config import DatabaseConfig
from .logging_config import get_logger

LOGGER = get_logger(__name__)

DRIVERNAME = "postgresql+psycopg2"
POOL_TIMEOUT_SECONDS = 30

EngineFactory = Callable[[DatabaseConfig], Engine]


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def build_url(config: DatabaseConfig) -> URL:
    return URL.create(
        DRIVERNAME,
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
    )


def build_engine(config: DatabaseConfig) -> Engine:
    """
    Create a PostgreSQL engine whose pool never holds more than one connection.

    Args:
        config: Connection parameters.

    Returns:
        Engine that must be disposed by the caller.
    """
    return create_engine(
        build_url(config),
        pool_size=config.pool_size,
        max_overflow=0,
        pool_timeout=POOL_TIMEOUT_SECONDS,
        pool_recycle=config.idle_timeout,
        connect_args={
            "sslmode": config.sslmode,
            "connect_timeout": config.connect_timeout,
        },
    )


@contextmanager
def provisioning_engine(
    config: DatabaseConfig,
    engine_factory: EngineFactory = build_engine,
) -> Generator[Engine, None, None]:
    """
    Context manager yielding an engine that is disposed on every exit path.

    Yields:
        SQLAlchemy Engine.
    """
    engine = engine_factory(config)
    try:
        yield engine
    finally:
        engine.dispose()
        LOGGER.debug("Connection pool released")


def check_connection(engine: Engine) -> Any:
    """
    Run a round-trip query and return the server timestamp.

    Raises whatever the driver raises; retrying is the caller's business.
    """
    with engine.connect() as conn:
        return conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
