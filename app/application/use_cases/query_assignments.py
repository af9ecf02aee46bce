"""AssignmentQueries — read-only views over the assignment ledger."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.use_cases.schedule_assignment import AssignmentScheduler
from app.domain.entities.assignment import Assignment
from app.domain.errors import AssignmentNotFoundError, ValidationError
from app.domain.policies.conflict_detection import ConflictSummary, summarize
from app.domain.value_objects.assignment_filter import AssignmentFilter


@dataclass
class AssignmentPage:
    """One page of a filtered, most-recent-first assignment listing."""

    items: list[Assignment]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


class AssignmentQueries:
    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        scheduler: AssignmentScheduler,
        max_page_size: int = 100,
    ):
        self._assignments = assignment_repo
        self._scheduler = scheduler
        self._max_page_size = max_page_size

    async def list_assignments(
        self,
        filters: AssignmentFilter | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> AssignmentPage:
        if page < 1:
            raise ValidationError("page must be >= 1", details={"page": page})
        if not 1 <= limit <= self._max_page_size:
            raise ValidationError(
                f"limit must be between 1 and {self._max_page_size}",
                details={"limit": limit},
            )
        filters = filters or AssignmentFilter()
        total = await self._assignments.count(filters)
        items = await self._assignments.list(filters, offset=(page - 1) * limit, limit=limit)
        return AssignmentPage(items=items, total=total, page=page, limit=limit)

    async def get_assignment(self, assignment_id: str) -> Assignment:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        return assignment

    async def assignments_for_survey(self, survey_id: str) -> list[Assignment]:
        """Every assignment of a survey in any status, most recent first."""
        return await self._assignments.list(AssignmentFilter(survey_id=survey_id))

    async def available_devices(self, all_device_ids: Iterable[str]) -> list[str]:
        """Devices from the caller's universe with no ACTIVE assignment.

        Keeps the caller's order and drops duplicates.
        """
        busy = await self._assignments.get_active_device_ids()
        available: list[str] = []
        seen: set[str] = set()
        for device_id in all_device_ids:
            if device_id in busy or device_id in seen:
                continue
            seen.add(device_id)
            available.append(device_id)
        return available

    async def conflicts_for_device(
        self,
        device_id: str,
        from_date: date,
        to_date: date,
        exclude_assignment_id: str | None = None,
    ) -> list[ConflictSummary]:
        """Dry run: what a proposal for this window would collide with."""
        conflicts = await self._scheduler.find_conflicts(
            device_id, from_date, to_date, exclude_assignment_id
        )
        return [summarize(a) for a in conflicts]
