"""LifecyclePolicy — allowed transitions of an assignment.

    ACTIVE --extend-->             ACTIVE (to_date changes)
    ACTIVE --revoke(COMPLETED)-->  COMPLETED
    ACTIVE --revoke(CANCELLED)-->  CANCELLED

Nothing leaves COMPLETED or CANCELLED.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from app.domain.entities.assignment import Assignment
from app.domain.errors import InvalidTransitionError, ValidationError
from app.domain.value_objects.date_range import DateRange
from app.domain.value_objects.enums import TERMINAL_STATUSES, AssignmentStatus


def _ensure_active(assignment: Assignment, action: str) -> None:
    if assignment.is_terminal():
        raise InvalidTransitionError(
            f"Cannot {action} assignment {assignment.id}: it is already {assignment.status.value}",
            details={"assignment_id": assignment.id, "status": assignment.status.value},
        )


def plan_extension(assignment: Assignment, new_to_date: date) -> DateRange:
    """Validate an extension and return the window it would produce.

    The new end may also pull the window in, as long as it stays on or after
    ``from_date``.
    """
    _ensure_active(assignment, "extend")
    if new_to_date < assignment.from_date:
        raise ValidationError(
            "New to_date must not be before from_date",
            details={
                "from_date": assignment.from_date.isoformat(),
                "to_date": new_to_date.isoformat(),
            },
        )
    return DateRange(assignment.from_date, new_to_date)


def plan_revocation(
    assignment: Assignment,
    outcome: AssignmentStatus,
    today: date,
) -> dict[str, Any]:
    """Return the field changes that move *assignment* into *outcome*.

    COMPLETED closes the window at *today* when the engagement ends early;
    an engagement that has not started yet cannot be completed, only cancelled.
    CANCELLED keeps the originally planned window.
    """
    if outcome not in TERMINAL_STATUSES:
        raise ValidationError(
            "Revocation outcome must be COMPLETED or CANCELLED",
            details={"outcome": getattr(outcome, "value", outcome)},
        )
    _ensure_active(assignment, "revoke")

    changes: dict[str, Any] = {"status": outcome}
    if outcome == AssignmentStatus.COMPLETED:
        if today < assignment.from_date:
            raise InvalidTransitionError(
                f"Cannot complete assignment {assignment.id} before it starts; cancel it instead",
                details={
                    "assignment_id": assignment.id,
                    "from_date": assignment.from_date.isoformat(),
                },
            )
        if today < assignment.to_date:
            changes["to_date"] = today
    return changes
