"""Tests for the sample-data loader behind app.tools.seed_db."""

from __future__ import annotations

from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.adapters.memory.device_lock import InProcessDeviceLock
from app.adapters.persistence.database import Base
from app.adapters.persistence.repositories import SqlAssignmentRepository
from app.adapters.persistence.unit_of_work import SqlUnitOfWork
from app.application.use_cases.schedule_assignment import AssignmentScheduler
from app.domain.value_objects.assignment_filter import AssignmentFilter
from app.domain.value_objects.enums import AssignmentStatus
from app.tools.seed_db import SAMPLE_ASSIGNMENTS, load_samples


@pytest_asyncio.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as s:
        yield s
    await engine.dispose()


# ─── In-memory store ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_first_load_creates_every_sample(repo, scheduler):
    counts = await load_samples(repo, scheduler)

    assert counts == {"created": len(SAMPLE_ASSIGNMENTS), "skipped": 0}
    completed = await repo.list(AssignmentFilter(status=AssignmentStatus.COMPLETED))
    assert [a.device_id for a in completed] == ["TRIMBLE_003"]
    assert completed[0].assigned_by == "Admin User"


@pytest.mark.asyncio
async def test_second_load_skips_everything(repo, scheduler):
    await load_samples(repo, scheduler)
    counts = await load_samples(repo, scheduler)

    assert counts == {"created": 0, "skipped": len(SAMPLE_ASSIGNMENTS)}
    assert await repo.count() == len(SAMPLE_ASSIGNMENTS)


@pytest.mark.asyncio
async def test_sample_blocked_by_other_active_assignment_is_skipped(repo, scheduler):
    await scheduler.propose_assignment(
        "TRIMBLE_001", "SUR_999", date(2024, 3, 1), date(2024, 3, 31), "ops"
    )
    counts = await load_samples(repo, scheduler)

    assert counts == {"created": len(SAMPLE_ASSIGNMENTS) - 1, "skipped": 1}
    assert await repo.list(AssignmentFilter(survey_id="SUR_001")) == []


# ─── SQL store ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_rerun_against_sql_keeps_one_row_per_sample(session):
    repo = SqlAssignmentRepository(session)
    scheduler = AssignmentScheduler(
        assignment_repo=repo,
        device_lock=InProcessDeviceLock(),
        unit_of_work=SqlUnitOfWork(session),
        today=lambda: date(2024, 2, 15),
    )

    first = await load_samples(repo, scheduler)
    second = await load_samples(repo, scheduler)

    assert first == {"created": 3, "skipped": 0}
    assert second == {"created": 0, "skipped": 3}
    rows = await repo.list(AssignmentFilter(device_id="TRIMBLE_003"))
    assert len(rows) == 1
    assert rows[0].status == AssignmentStatus.COMPLETED
