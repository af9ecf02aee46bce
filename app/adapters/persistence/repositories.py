"""SQLAlchemy repository implementations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.models import DeviceAssignmentModel
from app.application.ports.assignment_repo import AssignmentRepository
from app.domain.entities.assignment import (
    Assignment,
    check_changes,
    coerce_status,
    new_assignment_id,
)
from app.domain.errors import AssignmentNotFoundError
from app.domain.value_objects.assignment_filter import AssignmentFilter
from app.domain.value_objects.date_range import DateRange
from app.domain.value_objects.enums import AssignmentStatus

# ─── Mappers ─────────────────────────────────────────────────────────


def _assignment_to_domain(m: DeviceAssignmentModel) -> Assignment:
    return Assignment(
        id=m.id,
        device_id=m.device_id,
        survey_id=m.survey_id,
        from_date=m.from_date,
        to_date=m.to_date,
        assigned_by=m.assigned_by,
        status=AssignmentStatus(m.status),
        notes=m.notes,
        device_name=m.device_name,
        survey_name=m.survey_name,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _apply_filters(stmt, filters: AssignmentFilter | None):
    if filters is None:
        return stmt
    if filters.device_id is not None:
        stmt = stmt.where(DeviceAssignmentModel.device_id == filters.device_id)
    if filters.survey_id is not None:
        stmt = stmt.where(DeviceAssignmentModel.survey_id == filters.survey_id)
    if filters.status is not None:
        stmt = stmt.where(DeviceAssignmentModel.status == filters.status.value)
    return stmt


_RECENT_FIRST = (
    DeviceAssignmentModel.from_date.desc(),
    DeviceAssignmentModel.created_at.desc(),
    DeviceAssignmentModel.id,
)


# ─── Repositories ────────────────────────────────────────────────────


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def create(self, assignment: Assignment) -> Assignment:
        now = datetime.now(timezone.utc)
        m = DeviceAssignmentModel(
            id=new_assignment_id(),
            device_id=assignment.device_id,
            device_name=assignment.device_name,
            survey_id=assignment.survey_id,
            survey_name=assignment.survey_name,
            from_date=assignment.from_date,
            to_date=assignment.to_date,
            status=assignment.status.value,
            assigned_by=assignment.assigned_by,
            notes=assignment.notes,
            created_at=now,
            updated_at=now,
        )
        self._s.add(m)
        await self._s.flush()
        return _assignment_to_domain(m)

    async def get_by_id(self, assignment_id: str) -> Assignment | None:
        m = await self._s.get(DeviceAssignmentModel, assignment_id, populate_existing=True)
        return _assignment_to_domain(m) if m else None

    async def update(self, assignment_id: str, changes: dict[str, Any]) -> Assignment:
        m = await self._s.get(DeviceAssignmentModel, assignment_id)
        if m is None:
            raise AssignmentNotFoundError(assignment_id)
        check_changes(changes)
        DateRange(m.from_date, changes.get("to_date", m.to_date))

        for field_name, value in changes.items():
            if field_name == "status":
                value = coerce_status(value).value
            setattr(m, field_name, value)
        m.updated_at = datetime.now(timezone.utc)
        await self._s.flush()
        return _assignment_to_domain(m)

    async def delete(self, assignment_id: str) -> None:
        result = await self._s.execute(
            delete(DeviceAssignmentModel).where(DeviceAssignmentModel.id == assignment_id)
        )
        if result.rowcount == 0:
            raise AssignmentNotFoundError(assignment_id)
        await self._s.flush()

    async def list(
        self,
        filters: AssignmentFilter | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Assignment]:
        stmt = (
            _apply_filters(select(DeviceAssignmentModel), filters)
            .order_by(*_RECENT_FIRST)
            .execution_options(populate_existing=True)
        )
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._s.execute(stmt)
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def count(self, filters: AssignmentFilter | None = None) -> int:
        stmt = _apply_filters(select(func.count(DeviceAssignmentModel.id)), filters)
        return (await self._s.execute(stmt)).scalar() or 0

    async def get_active_for_device(self, device_id: str) -> list[Assignment]:
        return await self.list(
            AssignmentFilter(device_id=device_id, status=AssignmentStatus.ACTIVE)
        )

    async def get_active_device_ids(self) -> set[str]:
        result = await self._s.execute(
            select(DeviceAssignmentModel.device_id)
            .where(DeviceAssignmentModel.status == AssignmentStatus.ACTIVE.value)
            .distinct()
        )
        return set(result.scalars())
