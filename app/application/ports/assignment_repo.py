"""Port interface for assignment persistence.

The store is a plain ledger: it never checks for conflicts. Scheduling
policy lives in the use cases that call it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities.assignment import Assignment
from app.domain.value_objects.assignment_filter import AssignmentFilter


class AssignmentRepository(ABC):
    @abstractmethod
    async def create(self, assignment: Assignment) -> Assignment:
        """Persist a new record; assigns ``id``, ``created_at`` and ``updated_at``."""
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: str) -> Assignment | None:
        ...

    @abstractmethod
    async def update(self, assignment_id: str, changes: dict[str, Any]) -> Assignment:
        """Merge *changes* into the record and refresh ``updated_at``.

        Raises AssignmentNotFoundError for an unknown id and ValidationError
        when *changes* touches an immutable field.
        """
        ...

    @abstractmethod
    async def delete(self, assignment_id: str) -> None:
        """Hard delete. Raises AssignmentNotFoundError for an unknown id."""
        ...

    @abstractmethod
    async def list(
        self,
        filters: AssignmentFilter | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Assignment]:
        """Matching records ordered by ``from_date`` descending (most recent first)."""
        ...

    @abstractmethod
    async def count(self, filters: AssignmentFilter | None = None) -> int:
        ...

    @abstractmethod
    async def get_active_for_device(self, device_id: str) -> list[Assignment]:
        ...

    @abstractmethod
    async def get_active_device_ids(self) -> set[str]:
        ...
