"""ConflictDetectionPolicy — inclusive interval overlap against ACTIVE assignments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from app.domain.entities.assignment import Assignment
from app.domain.value_objects.date_range import DateRange


@dataclass(frozen=True)
class ConflictSummary:
    """Compact description of one blocking assignment, for error messages and pickers."""

    assignment_id: str
    device_id: str
    device_name: str | None
    conflicting_survey_id: str
    conflicting_survey_name: str | None
    from_date: date
    to_date: date


def find_overlapping(
    period: DateRange,
    candidates: Iterable[Assignment],
    exclude_id: str | None = None,
) -> list[Assignment]:
    """Return every ACTIVE candidate whose window overlaps *period*.

    COMPLETED and CANCELLED records are history and never conflict.
    *exclude_id* lets an extension ignore the record being extended.
    """
    return [
        a
        for a in candidates
        if a.is_active() and a.id != exclude_id and a.period.overlaps(period)
    ]


def summarize(assignment: Assignment) -> ConflictSummary:
    return ConflictSummary(
        assignment_id=assignment.id,
        device_id=assignment.device_id,
        device_name=assignment.device_name,
        conflicting_survey_id=assignment.survey_id,
        conflicting_survey_name=assignment.survey_name,
        from_date=assignment.from_date,
        to_date=assignment.to_date,
    )
