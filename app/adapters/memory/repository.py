"""In-memory assignment store with a per-device index of ACTIVE records."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

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


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sort_recent_first(assignments: list[Assignment]) -> list[Assignment]:
    # id ascending breaks ties, then a stable sort on (from_date, created_at) descending
    ordered = sorted(assignments, key=lambda a: a.id)
    return sorted(ordered, key=lambda a: (a.from_date, a.created_at), reverse=True)


class InMemoryAssignmentRepository(AssignmentRepository):
    """Dict-backed store.

    No method awaits, so each call runs to completion without interleaving on
    the event loop. Records are copied on the way in and out; callers never
    hold a reference to the stored object.
    """

    def __init__(self):
        self._records: dict[str, Assignment] = {}
        self._active_by_device: dict[str, set[str]] = {}

    def _index(self, assignment: Assignment) -> None:
        ids = self._active_by_device.setdefault(assignment.device_id, set())
        if assignment.is_active():
            ids.add(assignment.id)
        else:
            ids.discard(assignment.id)
        if not ids:
            del self._active_by_device[assignment.device_id]

    def _unindex(self, assignment: Assignment) -> None:
        ids = self._active_by_device.get(assignment.device_id)
        if ids is not None:
            ids.discard(assignment.id)
            if not ids:
                del self._active_by_device[assignment.device_id]

    async def create(self, assignment: Assignment) -> Assignment:
        now = _utcnow()
        stored = replace(
            assignment,
            id=new_assignment_id(),
            created_at=now,
            updated_at=now,
        )
        self._records[stored.id] = stored
        self._index(stored)
        return replace(stored)

    async def get_by_id(self, assignment_id: str) -> Assignment | None:
        stored = self._records.get(assignment_id)
        return replace(stored) if stored else None

    async def update(self, assignment_id: str, changes: dict[str, Any]) -> Assignment:
        stored = self._records.get(assignment_id)
        if stored is None:
            raise AssignmentNotFoundError(assignment_id)
        check_changes(changes)
        if "status" in changes:
            changes = {**changes, "status": coerce_status(changes["status"])}
        updated = replace(stored, **changes, updated_at=_utcnow())
        DateRange(updated.from_date, updated.to_date)  # raises if from_date > to_date
        self._records[assignment_id] = updated
        self._index(updated)
        return replace(updated)

    async def delete(self, assignment_id: str) -> None:
        stored = self._records.pop(assignment_id, None)
        if stored is None:
            raise AssignmentNotFoundError(assignment_id)
        self._unindex(stored)

    async def list(
        self,
        filters: AssignmentFilter | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Assignment]:
        filters = filters or AssignmentFilter()
        matches = _sort_recent_first([a for a in self._records.values() if filters.matches(a)])
        end = None if limit is None else offset + limit
        return [replace(a) for a in matches[offset:end]]

    async def count(self, filters: AssignmentFilter | None = None) -> int:
        filters = filters or AssignmentFilter()
        return sum(1 for a in self._records.values() if filters.matches(a))

    async def get_active_for_device(self, device_id: str) -> list[Assignment]:
        ids = self._active_by_device.get(device_id, set())
        return _sort_recent_first([replace(self._records[i]) for i in ids])

    async def get_active_device_ids(self) -> set[str]:
        return set(self._active_by_device)
