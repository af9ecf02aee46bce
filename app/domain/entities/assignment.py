"""Assignment entity — one device bound to one survey for an inclusive date window."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from app.domain.errors import ValidationError
from app.domain.value_objects.date_range import DateRange
from app.domain.value_objects.enums import AssignmentStatus

# Fields fixed at creation; changing them after the fact is a caller error.
IMMUTABLE_FIELDS = frozenset({"id", "device_id", "survey_id", "from_date", "assigned_by", "created_at"})
MUTABLE_FIELDS = frozenset({"to_date", "status", "notes", "device_name", "survey_name"})


@dataclass
class Assignment:
    id: str | None
    device_id: str
    survey_id: str
    from_date: date
    to_date: date
    assigned_by: str
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    notes: str | None = None
    device_name: str | None = None
    survey_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def period(self) -> DateRange:
        return DateRange(self.from_date, self.to_date)

    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE

    def is_terminal(self) -> bool:
        return self.status.is_terminal


def check_changes(changes: dict[str, Any]) -> None:
    """Reject partial updates that touch identity or unknown fields."""
    immutable = sorted(set(changes) & IMMUTABLE_FIELDS)
    if immutable:
        raise ValidationError(
            "Cannot change immutable assignment fields: " + ", ".join(immutable),
            details={"fields": immutable},
        )
    unknown = sorted(set(changes) - MUTABLE_FIELDS)
    if unknown:
        raise ValidationError(
            "Unknown assignment fields: " + ", ".join(unknown),
            details={"fields": unknown},
        )


def coerce_status(value: Any) -> AssignmentStatus:
    try:
        return AssignmentStatus(value)
    except ValueError:
        raise ValidationError(
            f"Unknown assignment status: {value}", details={"status": value}
        ) from None


def new_assignment_id() -> str:
    return f"ASN_{uuid.uuid4().hex[:12].upper()}"
