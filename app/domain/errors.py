"""Scheduling error hierarchy.

    SchedulingError (base)
    ├── ValidationError          malformed input, immutable field change
    ├── AssignmentNotFoundError  unknown assignment id
    ├── ConflictError            overlap with ACTIVE assignment(s) of the same device
    └── InvalidTransitionError   mutating a terminal assignment

None of these are transient: callers change the request instead of retrying it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.entities.assignment import Assignment


class SchedulingError(Exception):
    """Base class for every business-rule rejection raised by the scheduler."""

    code = "SCHEDULING_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class ValidationError(SchedulingError):
    code = "VALIDATION_ERROR"


class AssignmentNotFoundError(SchedulingError):
    code = "NOT_FOUND"

    def __init__(self, assignment_id: str):
        super().__init__(
            f"Device assignment {assignment_id} not found",
            details={"assignment_id": assignment_id},
        )
        self.assignment_id = assignment_id


class ConflictError(SchedulingError):
    """The requested window overlaps one or more ACTIVE assignments.

    ``conflicts`` holds the blocking records so the caller can tell which
    engagement is in the way.
    """

    code = "CONFLICT"

    def __init__(self, device_id: str, conflicts: list["Assignment"]):
        ids = [a.id for a in conflicts]
        super().__init__(
            f"Device {device_id} is already assigned for an overlapping period",
            details={"device_id": device_id, "conflicting_assignment_ids": ids},
        )
        self.device_id = device_id
        self.conflicts = list(conflicts)


class InvalidTransitionError(SchedulingError):
    code = "INVALID_TRANSITION"
