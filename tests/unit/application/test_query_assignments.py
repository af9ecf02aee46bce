"""Tests for AssignmentQueries."""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.errors import AssignmentNotFoundError, ValidationError
from app.domain.value_objects.assignment_filter import AssignmentFilter
from app.domain.value_objects.enums import AssignmentStatus


def d(iso: str) -> date:
    return date.fromisoformat(iso)


async def _seed(scheduler):
    """Three devices, two surveys, one cancelled record."""
    a = await scheduler.propose_assignment("D1", "S1", d("2024-01-01"), d("2024-01-31"), "admin")
    b = await scheduler.propose_assignment("D1", "S2", d("2024-02-01"), d("2024-02-28"), "admin")
    c = await scheduler.propose_assignment("D2", "S1", d("2024-01-15"), d("2024-03-01"), "admin")
    e = await scheduler.propose_assignment("D3", "S1", d("2023-12-01"), d("2023-12-31"), "admin")
    await scheduler.revoke_assignment(e.id, AssignmentStatus.CANCELLED)
    return a, b, c, e


@pytest.mark.asyncio
async def test_list_is_most_recent_first(scheduler, queries):
    a, b, c, e = await _seed(scheduler)
    page = await queries.list_assignments()
    assert [x.id for x in page.items] == [b.id, c.id, a.id, e.id]
    assert page.total == 4
    assert page.total_pages == 1


@pytest.mark.asyncio
async def test_list_filters_combine(scheduler, queries):
    a, b, c, e = await _seed(scheduler)
    page = await queries.list_assignments(
        AssignmentFilter(survey_id="S1", status=AssignmentStatus.ACTIVE)
    )
    assert [x.id for x in page.items] == [c.id, a.id]

    page = await queries.list_assignments(AssignmentFilter(device_id="D1"))
    assert [x.id for x in page.items] == [b.id, a.id]


@pytest.mark.asyncio
async def test_list_paginates(scheduler, queries):
    a, b, c, e = await _seed(scheduler)
    first = await queries.list_assignments(page=1, limit=3)
    second = await queries.list_assignments(page=2, limit=3)
    assert [x.id for x in first.items] == [b.id, c.id, a.id]
    assert [x.id for x in second.items] == [e.id]
    assert second.total == 4
    assert second.total_pages == 2


@pytest.mark.asyncio
async def test_empty_listing_has_no_pages(queries):
    page = await queries.list_assignments()
    assert page.items == []
    assert page.total_pages == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 51)])
async def test_bad_paging_rejected(queries, page, limit):
    with pytest.raises(ValidationError):
        await queries.list_assignments(page=page, limit=limit)


@pytest.mark.asyncio
async def test_get_assignment(scheduler, queries):
    a, *_ = await _seed(scheduler)
    assert (await queries.get_assignment(a.id)).survey_id == "S1"
    with pytest.raises(AssignmentNotFoundError):
        await queries.get_assignment("ASN_MISSING")


@pytest.mark.asyncio
async def test_assignments_for_survey_includes_every_status(scheduler, queries):
    a, b, c, e = await _seed(scheduler)
    history = await queries.assignments_for_survey("S1")
    assert [x.id for x in history] == [c.id, a.id, e.id]
    assert history[-1].status == AssignmentStatus.CANCELLED


@pytest.mark.asyncio
async def test_available_devices(scheduler, queries):
    await _seed(scheduler)
    available = await queries.available_devices(["D4", "D1", "D3", "D2", "D4"])
    assert available == ["D4", "D3"]


@pytest.mark.asyncio
async def test_conflicts_for_device_summarizes_blockers(scheduler, queries):
    a, b, *_ = await _seed(scheduler)
    summaries = await queries.conflicts_for_device("D1", d("2024-01-31"), d("2024-02-01"))
    assert [s.assignment_id for s in summaries] == [b.id, a.id]
    assert {s.conflicting_survey_id for s in summaries} == {"S1", "S2"}


@pytest.mark.asyncio
async def test_conflicts_for_device_free_window(scheduler, queries):
    await _seed(scheduler)
    assert await queries.conflicts_for_device("D1", d("2024-03-01"), d("2024-03-31")) == []
