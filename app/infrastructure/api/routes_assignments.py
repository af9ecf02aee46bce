"""Device assignment endpoints — scheduling, lifecycle, and read views."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from app.application.use_cases.query_assignments import AssignmentQueries
from app.application.use_cases.schedule_assignment import AssignmentScheduler
from app.config import settings
from app.domain.value_objects.assignment_filter import AssignmentFilter
from app.domain.value_objects.enums import AssignmentStatus
from app.infrastructure.api.dependencies import get_queries, get_scheduler
from app.infrastructure.api.schemas import (
    AmendNotesRequest,
    AvailableDevicesRequest,
    ExtendAssignmentRequest,
    ProposeAssignmentRequest,
    RevokeAssignmentRequest,
)
from app.infrastructure.api.serializers import serialize_assignment, serialize_conflict

router = APIRouter(prefix="/device-assignments", tags=["device-assignments"])


@router.get("")
async def list_assignments(
    device_id: str | None = None,
    survey_id: str | None = None,
    status_filter: AssignmentStatus | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1),
    queries: AssignmentQueries = Depends(get_queries),
):
    """List assignments, most recent engagement first."""
    result = await queries.list_assignments(
        AssignmentFilter(device_id=device_id, survey_id=survey_id, status=status_filter),
        page=page,
        limit=limit,
    )
    return {
        "data": [serialize_assignment(a) for a in result.items],
        "pagination": {
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "total_pages": result.total_pages,
        },
    }


@router.get("/by-survey/{survey_id}")
async def assignments_for_survey(
    survey_id: str,
    queries: AssignmentQueries = Depends(get_queries),
):
    """Device-usage history of one survey."""
    assignments = await queries.assignments_for_survey(survey_id)
    return {"data": [serialize_assignment(a) for a in assignments]}


@router.get("/conflicts")
async def check_conflicts(
    device_id: str,
    from_date: date,
    to_date: date,
    exclude_id: str | None = None,
    queries: AssignmentQueries = Depends(get_queries),
):
    """Dry run: ACTIVE assignments a proposal for this window would collide with."""
    conflicts = await queries.conflicts_for_device(device_id, from_date, to_date, exclude_id)
    return {
        "has_conflicts": bool(conflicts),
        "data": [serialize_conflict(c) for c in conflicts],
    }


@router.post("/available-devices")
async def available_devices(
    body: AvailableDevicesRequest,
    queries: AssignmentQueries = Depends(get_queries),
):
    """Filter the caller's device list down to devices without an ACTIVE assignment."""
    return {"data": await queries.available_devices(body.device_ids)}


@router.get("/{assignment_id}")
async def get_assignment(
    assignment_id: str,
    queries: AssignmentQueries = Depends(get_queries),
):
    assignment = await queries.get_assignment(assignment_id)
    return {"data": serialize_assignment(assignment)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def propose_assignment(
    body: ProposeAssignmentRequest,
    scheduler: AssignmentScheduler = Depends(get_scheduler),
):
    """Create an ACTIVE assignment; 409 with the blocking records on overlap."""
    assignment = await scheduler.propose_assignment(
        device_id=body.device_id,
        survey_id=body.survey_id,
        from_date=body.from_date,
        to_date=body.to_date,
        assigned_by=body.assigned_by,
        notes=body.notes,
        device_name=body.device_name,
        survey_name=body.survey_name,
    )
    return {
        "data": serialize_assignment(assignment),
        "message": "Device assignment created successfully",
    }


@router.post("/{assignment_id}/extend")
async def extend_assignment(
    assignment_id: str,
    body: ExtendAssignmentRequest,
    scheduler: AssignmentScheduler = Depends(get_scheduler),
):
    assignment = await scheduler.extend_assignment(assignment_id, body.to_date)
    return {"data": serialize_assignment(assignment)}


@router.post("/{assignment_id}/revoke")
async def revoke_assignment(
    assignment_id: str,
    body: RevokeAssignmentRequest,
    scheduler: AssignmentScheduler = Depends(get_scheduler),
):
    assignment = await scheduler.revoke_assignment(
        assignment_id, AssignmentStatus(body.outcome)
    )
    return {"data": serialize_assignment(assignment)}


@router.patch("/{assignment_id}/notes")
async def amend_notes(
    assignment_id: str,
    body: AmendNotesRequest,
    scheduler: AssignmentScheduler = Depends(get_scheduler),
):
    assignment = await scheduler.amend_notes(assignment_id, body.notes)
    return {"data": serialize_assignment(assignment)}


@router.delete("/{assignment_id}")
async def delete_assignment(
    assignment_id: str,
    scheduler: AssignmentScheduler = Depends(get_scheduler),
):
    """Hard delete — only for correcting erroneous entries."""
    await scheduler.delete_assignment(assignment_id)
    return {"message": "Device assignment deleted successfully"}
