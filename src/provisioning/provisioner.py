"""Provisioning sequence: connect with retry, create schema, seed timelines.

    ValidateConfig -> ConnectWithRetry -> CreateSchema -> SeedData

Every step after ValidateConfig runs inside `provisioning_engine`, so the
connection pool is released whichever way the run ends.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy.engine import Engine

from core.config import DatabaseConfig, Settings, load_database_config
from core.db import EngineFactory, build_engine, check_connection, provisioning_engine
from core.logging_config import get_logger
from provisioning.retry import DEFAULT_RETRY_POLICY, RetryPolicy, connect_with_retry
from provisioning.schema import create_schema
from provisioning.seed import seed_timelines

LOGGER = get_logger(__name__)


@dataclass
class ProvisionResult:
    """Outcome of a successful provisioning run."""

    attempts: int = 0
    server_time: Any = None
    tables_created: List[str] = field(default_factory=list)
    tables_existing: List[str] = field(default_factory=list)
    rows_inserted: int = 0
    rows_skipped: int = 0


def _log_error_details(exc: BaseException) -> None:
    code = getattr(exc, "code", None)
    message = getattr(exc, "message", str(exc))
    LOGGER.error("Error initializing database: %s", exc)
    LOGGER.error(
        "Error details: code=%s message=%s",
        code,
        message,
        extra={"extra_data": {"code": code, "message": message, "type": type(exc).__name__}},
    )


def _connect(
    engine: Engine,
    retry_policy: RetryPolicy,
    sleep: Callable[[float], None],
) -> Tuple[Any, int]:
    LOGGER.info("Testing database connection...")
    server_time, attempts = connect_with_retry(
        lambda: check_connection(engine), retry_policy, sleep=sleep
    )
    LOGGER.info("Connection successful: %s", server_time)
    return server_time, attempts


def provision(
    config: DatabaseConfig,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    engine_factory: EngineFactory = build_engine,
    sleep: Callable[[float], None] = time.sleep,
) -> ProvisionResult:
    """
    Create the timeline schema and seed reference data.

    Safe to run repeatedly against an empty, partial or fully initialized
    database.

    Args:
        config: Validated connection parameters.
        retry_policy: Bound and delay for the connectivity check.
        engine_factory: Builds the engine; replaced in tests.
        sleep: Used between connection attempts; replaced in tests.

    Returns:
        ProvisionResult describing what changed.

    Raises:
        ConnectionExhaustedError: the database never answered.
        SQLExecutionError: the schema or seed batch failed.
    """
    LOGGER.info("Starting database initialization...")
    LOGGER.info(
        "Database configuration: %s",
        config.describe(),
        extra={"extra_data": config.describe()},
    )

    result = ProvisionResult()
    try:
        with provisioning_engine(config, engine_factory) as engine:
            result.server_time, result.attempts = _connect(engine, retry_policy, sleep)

            schema = create_schema(engine)
            result.tables_created = schema.tables_created
            result.tables_existing = schema.tables_existing

            seeded = seed_timelines(engine)
            result.rows_inserted = seeded.inserted
            result.rows_skipped = seeded.skipped
    except Exception as exc:
        _log_error_details(exc)
        raise

    LOGGER.info("Database initialization completed")
    return result


def check_database(
    config: DatabaseConfig,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    engine_factory: EngineFactory = build_engine,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Run only the retrying connectivity check and return the server time."""
    with provisioning_engine(config, engine_factory) as engine:
        server_time, _ = _connect(engine, retry_policy, sleep)
    return server_time


def run_provisioning(
    settings: Optional[Settings] = None,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    engine_factory: EngineFactory = build_engine,
    sleep: Callable[[float], None] = time.sleep,
) -> ProvisionResult:
    """
    Validate the environment, then provision.

    Raises:
        MissingConfigurationError: before any connection is attempted.
    """
    config = load_database_config(settings)
    return provision(config, retry_policy, engine_factory, sleep)
