"""Idempotent schema creation for the timeline tables."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.db import Base
from core.exceptions import SQLExecutionError, describe_sql_error
from core.logging_config import get_logger
from core.models import TABLE_NAMES

LOGGER = get_logger(__name__)


@dataclass
class SchemaResult:
    """Which tables this run created and which were already there."""

    tables_created: List[str] = field(default_factory=list)
    tables_existing: List[str] = field(default_factory=list)


def create_schema(engine: Engine) -> SchemaResult:
    """
    Create the five timeline tables if they do not exist.

    Runs as one transaction; `create_all` orders tables by foreign-key
    dependency and skips any table that already exists, so a partially
    initialized database is completed rather than rejected.

    Raises:
        SQLExecutionError: the batch failed; nothing from it is committed.
    """
    LOGGER.info("Creating tables...")
    tables = [Base.metadata.tables[name] for name in TABLE_NAMES]
    try:
        with engine.begin() as conn:
            present = set(inspect(conn).get_table_names())
            Base.metadata.create_all(conn, tables=tables, checkfirst=True)
    except SQLAlchemyError as exc:
        code, message = describe_sql_error(exc)
        raise SQLExecutionError("create_schema", code, message) from exc

    result = SchemaResult(
        tables_created=[name for name in TABLE_NAMES if name not in present],
        tables_existing=[name for name in TABLE_NAMES if name in present],
    )
    if result.tables_created:
        LOGGER.info("Created tables: %s", ", ".join(result.tables_created))
    LOGGER.info("Tables created successfully")
    return result
