"""Tests for SqlAssignmentRepository against an in-memory SQLite database."""

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
from app.domain.entities.assignment import Assignment
from app.domain.errors import AssignmentNotFoundError, ConflictError, ValidationError
from app.domain.value_objects.assignment_filter import AssignmentFilter
from app.domain.value_objects.enums import AssignmentStatus


@pytest_asyncio.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as s:
        yield s
    await engine.dispose()


@pytest.fixture
def sql_repo(session):
    return SqlAssignmentRepository(session)


def _new(device="D1", survey="S1", start="2024-01-01", end="2024-01-31") -> Assignment:
    return Assignment(
        id=None, device_id=device, survey_id=survey,
        from_date=date.fromisoformat(start), to_date=date.fromisoformat(end),
        assigned_by="admin", device_name="Trimble", survey_name="Gas main",
    )


@pytest.mark.asyncio
async def test_create_and_get(sql_repo):
    a = await sql_repo.create(_new())
    assert a.id.startswith("ASN_")
    fetched = await sql_repo.get_by_id(a.id)
    assert fetched.device_id == "D1"
    assert fetched.survey_name == "Gas main"
    assert fetched.status == AssignmentStatus.ACTIVE
    assert fetched.from_date == date(2024, 1, 1)


@pytest.mark.asyncio
async def test_get_unknown_returns_none(sql_repo):
    assert await sql_repo.get_by_id("ASN_MISSING") is None


@pytest.mark.asyncio
async def test_update_status_and_to_date(sql_repo):
    a = await sql_repo.create(_new())
    updated = await sql_repo.update(
        a.id, {"status": AssignmentStatus.COMPLETED, "to_date": date(2024, 1, 20)}
    )
    assert updated.status == AssignmentStatus.COMPLETED
    assert updated.to_date == date(2024, 1, 20)
    assert await sql_repo.get_active_for_device("D1") == []


@pytest.mark.asyncio
async def test_update_identity_field_rejected(sql_repo):
    a = await sql_repo.create(_new())
    with pytest.raises(ValidationError):
        await sql_repo.update(a.id, {"device_id": "D9"})
    assert (await sql_repo.get_by_id(a.id)).device_id == "D1"


@pytest.mark.asyncio
async def test_update_unknown_status_rejected(sql_repo):
    a = await sql_repo.create(_new())
    with pytest.raises(ValidationError) as exc:
        await sql_repo.update(a.id, {"status": "ARCHIVED"})
    assert exc.value.details == {"status": "ARCHIVED"}
    assert (await sql_repo.get_by_id(a.id)).status == AssignmentStatus.ACTIVE


@pytest.mark.asyncio
async def test_update_and_delete_unknown(sql_repo):
    with pytest.raises(AssignmentNotFoundError):
        await sql_repo.update("ASN_MISSING", {"notes": "x"})
    with pytest.raises(AssignmentNotFoundError):
        await sql_repo.delete("ASN_MISSING")


@pytest.mark.asyncio
async def test_delete(sql_repo):
    a = await sql_repo.create(_new())
    await sql_repo.delete(a.id)
    assert await sql_repo.get_by_id(a.id) is None
    assert await sql_repo.count() == 0


@pytest.mark.asyncio
async def test_list_order_filters_and_paging(sql_repo):
    older = await sql_repo.create(_new(start="2024-01-01", end="2024-01-05"))
    newer = await sql_repo.create(_new(start="2024-03-01", end="2024-03-05"))
    other = await sql_repo.create(_new(device="D2", survey="S2", start="2024-02-01", end="2024-02-05"))

    assert [a.id for a in await sql_repo.list()] == [newer.id, other.id, older.id]
    assert [a.id for a in await sql_repo.list(AssignmentFilter(device_id="D1"))] == [newer.id, older.id]
    assert [a.id for a in await sql_repo.list(offset=2, limit=5)] == [older.id]
    assert await sql_repo.count(AssignmentFilter(survey_id="S2")) == 1
    assert await sql_repo.get_active_device_ids() == {"D1", "D2"}


@pytest.mark.asyncio
async def test_scheduler_over_sql_store(session, sql_repo):
    scheduler = AssignmentScheduler(
        assignment_repo=sql_repo,
        device_lock=InProcessDeviceLock(),
        unit_of_work=SqlUnitOfWork(session),
        today=lambda: date(2024, 2, 15),
    )
    first = await scheduler.propose_assignment(
        "D1", "S1", date(2024, 1, 1), date(2024, 3, 1), "admin"
    )
    with pytest.raises(ConflictError) as exc:
        await scheduler.propose_assignment("D1", "S2", date(2024, 2, 1), date(2024, 2, 15), "admin")
    assert [c.id for c in exc.value.conflicts] == [first.id]

    done = await scheduler.revoke_assignment(first.id, AssignmentStatus.COMPLETED)
    assert done.to_date == date(2024, 2, 15)

    second = await scheduler.propose_assignment(
        "D1", "S2", date(2024, 2, 16), date(2024, 2, 28), "admin"
    )
    assert await sql_repo.count(AssignmentFilter(status=AssignmentStatus.ACTIVE)) == 1
    assert (await sql_repo.get_by_id(second.id)).survey_id == "S2"
