"""Reference vendor timelines inserted on first provisioning."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import SQLExecutionError, describe_sql_error
from core.logging_config import get_logger
from core.models import MILESTONES, Timeline

LOGGER = get_logger(__name__)

# (company_id, company_name); there is no company "16"
SEED_TIMELINES: Tuple[Tuple[str, str], ...] = (
    ("1", "Accenture"),
    ("2", "Atos"),
    ("3", "BCG"),
    ("4", "Cognizant"),
    ("5", "Dell"),
    ("6", "Delloitte"),
    ("7", "Digitas"),
    ("8", "Diversified"),
    ("9", "EY"),
    ("10", "GlobalLogic"),
    ("11", "GlobeCast"),
    ("12", "IBM"),
    ("13", "InfoSys"),
    ("14", "KPMG"),
    ("15", "Mckinsey"),
    ("17", "NEP"),
    ("18", "PWC"),
    ("19", "Qvest"),
    ("20", "SoftServe"),
    ("21", "SouthWorks"),
    ("22", "TenX"),
    ("23", "Valtech"),
    ("24", "Whyfive"),
)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class SeedResult:
    inserted: int = 0
    skipped: int = 0


def seed_rows() -> List[Dict[str, Any]]:
    """Parameter sets for the seed insert, every milestone flag false."""
    flags = {f"{milestone}_completed": False for milestone in MILESTONES}
    return [
        {"company_id": company_id, "company_name": company_name, **flags}
        for company_id, company_name in SEED_TIMELINES
    ]


def seed_timelines(engine: Engine) -> SeedResult:
    """
    Insert the reference timelines, leaving existing rows untouched.

    Uses INSERT ... ON CONFLICT (company_id) DO NOTHING, so rows that already
    exist keep whatever names and milestone values they have.

    Raises:
        SQLExecutionError: the batch failed; nothing from it is committed.
    """
    LOGGER.info("Inserting initial vendor data...")
    dialect = engine.dialect.name
    if dialect not in _INSERT_BY_DIALECT:
        raise SQLExecutionError(
            "seed_timelines", None, f"Upsert-skip not supported for dialect {dialect!r}"
        )

    rows = seed_rows()
    seed_ids = [row["company_id"] for row in rows]
    stmt = (
        _INSERT_BY_DIALECT[dialect](Timeline)
        .on_conflict_do_nothing(index_elements=["company_id"])
    )
    try:
        with engine.begin() as conn:
            already_present = set(
                conn.scalars(
                    select(Timeline.company_id).where(Timeline.company_id.in_(seed_ids))
                )
            )
            conn.execute(stmt, rows)
    except SQLAlchemyError as exc:
        code, message = describe_sql_error(exc)
        raise SQLExecutionError("seed_timelines", code, message) from exc

    result = SeedResult(
        inserted=len(rows) - len(already_present),
        skipped=len(already_present),
    )
    LOGGER.info(
        "Initial data inserted successfully (%d new, %d already present)",
        result.inserted,
        result.skipped,
    )
    return result
