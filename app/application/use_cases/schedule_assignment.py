"""AssignmentScheduler — conflict-checked device-to-survey assignment lifecycle."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import AsyncIterator, Callable

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.device_lock import DeviceLock
from app.application.ports.unit_of_work import UnitOfWork
from app.domain.entities.assignment import Assignment
from app.domain.errors import (
    AssignmentNotFoundError,
    ConflictError,
    InvalidTransitionError,
    ValidationError,
)
from app.domain.policies.conflict_detection import find_overlapping
from app.domain.policies.lifecycle import plan_extension, plan_revocation
from app.domain.value_objects.date_range import DateRange
from app.domain.value_objects.enums import AssignmentStatus

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _require_id(value: str | None, field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required", details={"field": field_name})
    return value.strip()


class AssignmentScheduler:
    """Enforces one ACTIVE engagement per device at any point in time.

    Every mutation runs check-then-write under the device lock and commits
    before the lock is released, so two concurrent proposals for the same
    device cannot both pass the conflict check.
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        device_lock: DeviceLock,
        unit_of_work: UnitOfWork,
        today: Callable[[], date] = utc_today,
    ):
        self._assignments = assignment_repo
        self._lock = device_lock
        self._uow = unit_of_work
        self._today = today

    @asynccontextmanager
    async def _device_transaction(self, device_id: str) -> AsyncIterator[None]:
        async with self._lock.lock(device_id):
            try:
                yield
            except BaseException:
                await self._uow.rollback()
                raise
            await self._uow.commit()

    async def _load(self, assignment_id: str) -> Assignment:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        return assignment

    async def find_conflicts(
        self,
        device_id: str,
        from_date: date,
        to_date: date,
        exclude_assignment_id: str | None = None,
    ) -> list[Assignment]:
        """Return the ACTIVE assignments of *device_id* overlapping [from_date, to_date].

        Read-only; an empty list means the window is free.
        """
        device_id = _require_id(device_id, "device_id")
        period = DateRange(from_date, to_date)
        active = await self._assignments.get_active_for_device(device_id)
        return find_overlapping(period, active, exclude_id=exclude_assignment_id)

    async def propose_assignment(
        self,
        device_id: str,
        survey_id: str,
        from_date: date,
        to_date: date,
        assigned_by: str,
        notes: str | None = None,
        device_name: str | None = None,
        survey_name: str | None = None,
    ) -> Assignment:
        """Create an ACTIVE assignment or raise ConflictError listing the blockers."""
        device_id = _require_id(device_id, "device_id")
        survey_id = _require_id(survey_id, "survey_id")
        assigned_by = _require_id(assigned_by, "assigned_by")
        period = DateRange(from_date, to_date)

        async with self._device_transaction(device_id):
            active = await self._assignments.get_active_for_device(device_id)
            conflicts = find_overlapping(period, active)
            if conflicts:
                logger.warning(
                    "Rejected assignment of device %s to survey %s for %s..%s: blocked by %s",
                    device_id, survey_id, from_date, to_date,
                    ", ".join(a.id for a in conflicts),
                )
                raise ConflictError(device_id, conflicts)

            created = await self._assignments.create(
                Assignment(
                    id=None,
                    device_id=device_id,
                    survey_id=survey_id,
                    from_date=period.start,
                    to_date=period.end,
                    assigned_by=assigned_by,
                    status=AssignmentStatus.ACTIVE,
                    notes=notes,
                    device_name=device_name,
                    survey_name=survey_name,
                )
            )

        logger.info(
            "Assignment %s: device %s → survey %s (%s..%s) by %s",
            created.id, device_id, survey_id, from_date, to_date, assigned_by,
        )
        return created

    async def extend_assignment(self, assignment_id: str, new_to_date: date) -> Assignment:
        """Move the end of an ACTIVE assignment, re-checking the device's other engagements."""
        current = await self._load(assignment_id)

        async with self._device_transaction(current.device_id):
            # Re-read under the lock; a concurrent revoke may have landed.
            current = await self._load(assignment_id)
            try:
                period = plan_extension(current, new_to_date)
            except InvalidTransitionError as e:
                logger.warning("Rejected extension of %s: %s", assignment_id, e.message)
                raise
            active = await self._assignments.get_active_for_device(current.device_id)
            conflicts = find_overlapping(period, active, exclude_id=current.id)
            if conflicts:
                logger.warning(
                    "Rejected extension of %s to %s: blocked by %s",
                    assignment_id, new_to_date, ", ".join(a.id for a in conflicts),
                )
                raise ConflictError(current.device_id, conflicts)

            updated = await self._assignments.update(assignment_id, {"to_date": new_to_date})

        logger.info(
            "Assignment %s: to_date %s → %s", assignment_id, current.to_date, new_to_date
        )
        return updated

    async def revoke_assignment(
        self, assignment_id: str, outcome: AssignmentStatus
    ) -> Assignment:
        """Move an ACTIVE assignment to COMPLETED or CANCELLED."""
        current = await self._load(assignment_id)

        async with self._device_transaction(current.device_id):
            current = await self._load(assignment_id)
            try:
                changes = plan_revocation(current, outcome, self._today())
            except InvalidTransitionError as e:
                logger.warning("Rejected revocation of %s: %s", assignment_id, e.message)
                raise
            updated = await self._assignments.update(assignment_id, changes)

        logger.info(
            "Assignment %s: %s → %s (to_date %s)",
            assignment_id, current.status.value, updated.status.value, updated.to_date,
        )
        return updated

    async def amend_notes(self, assignment_id: str, notes: str | None) -> Assignment:
        """Replace the free-text notes; allowed in any status."""
        current = await self._load(assignment_id)

        async with self._device_transaction(current.device_id):
            updated = await self._assignments.update(assignment_id, {"notes": notes})

        logger.info("Assignment %s: notes updated", assignment_id)
        return updated

    async def delete_assignment(self, assignment_id: str) -> None:
        """Hard delete, for correcting erroneous entries only."""
        current = await self._load(assignment_id)

        async with self._device_transaction(current.device_id):
            await self._assignments.delete(assignment_id)

        logger.info(
            "Assignment %s deleted (device %s, survey %s)",
            assignment_id, current.device_id, current.survey_id,
        )
