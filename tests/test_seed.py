"""Tests for the reference vendor seed."""
from __future__ import annotations

import pytest
from sqlalchemy import func, select, update

from core.exceptions import SQLExecutionError
from core.models import MILESTONES, Timeline
from provisioning.schema import create_schema
from provisioning.seed import SEED_TIMELINES, seed_rows, seed_timelines


def _timelines(engine):
    with engine.connect() as conn:
        return conn.execute(
            select(Timeline.__table__).order_by(Timeline.company_id)
        ).all()


def test_seed_list_contents():
    ids = [company_id for company_id, _ in SEED_TIMELINES]

    assert len(SEED_TIMELINES) == 23
    assert ids == [str(n) for n in range(1, 25) if n != 16]
    assert len(set(ids)) == len(ids)


def test_seed_rows_have_false_milestones():
    for row in seed_rows():
        for milestone in MILESTONES:
            assert row[f"{milestone}_completed"] is False


def test_seed_inserts_every_row(engine):
    create_schema(engine)

    result = seed_timelines(engine)

    rows = _timelines(engine)
    assert result.inserted == 23
    assert result.skipped == 0
    assert {(r.company_id, r.company_name) for r in rows} == set(SEED_TIMELINES)
    assert all(not r.rfi_sent_completed for r in rows)


def test_seed_twice_keeps_one_row_per_company(engine):
    create_schema(engine)
    seed_timelines(engine)

    result = seed_timelines(engine)

    with engine.connect() as conn:
        total = conn.execute(select(func.count()).select_from(Timeline)).scalar_one()
    assert total == 23
    assert result.inserted == 0
    assert result.skipped == 23


def test_existing_rows_left_untouched(engine):
    """Rows changed after seeding keep their changes on a re-run."""
    create_schema(engine)
    seed_timelines(engine)
    with engine.begin() as conn:
        conn.execute(
            update(Timeline)
            .where(Timeline.company_id == "12")
            .values(company_name="IBM Consulting", nda_signed_completed=True)
        )

    seed_timelines(engine)

    with engine.connect() as conn:
        row = conn.execute(
            select(Timeline.__table__).where(Timeline.company_id == "12")
        ).one()
    assert row.company_name == "IBM Consulting"
    assert row.nda_signed_completed is True


def test_seed_fills_in_missing_rows(engine):
    create_schema(engine)
    with engine.begin() as conn:
        conn.execute(
            Timeline.__table__.insert().values(company_id="3", company_name="BCG")
        )

    result = seed_timelines(engine)

    assert result.inserted == 22
    assert result.skipped == 1
    assert len(_timelines(engine)) == 23


def test_seed_without_schema_fails(engine):
    with pytest.raises(SQLExecutionError) as exc_info:
        seed_timelines(engine)

    assert exc_info.value.stage == "seed_timelines"
    assert "timelines" in exc_info.value.message
