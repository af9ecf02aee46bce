"""Domain objects → API response dicts."""

from __future__ import annotations

from app.domain.entities.assignment import Assignment
from app.domain.policies.conflict_detection import ConflictSummary


def serialize_assignment(a: Assignment) -> dict:
    return {
        "id": a.id,
        "device_id": a.device_id,
        "device_name": a.device_name,
        "survey_id": a.survey_id,
        "survey_name": a.survey_name,
        "from_date": a.from_date.isoformat(),
        "to_date": a.to_date.isoformat(),
        "status": a.status.value,
        "assigned_by": a.assigned_by,
        "notes": a.notes,
        "created_at": a.created_at.isoformat() if a.created_at else None,
        "updated_at": a.updated_at.isoformat() if a.updated_at else None,
    }


def serialize_conflict(c: ConflictSummary) -> dict:
    return {
        "assignment_id": c.assignment_id,
        "device_id": c.device_id,
        "device_name": c.device_name or "",
        "conflicting_survey_id": c.conflicting_survey_id,
        "conflicting_survey_name": c.conflicting_survey_name or "",
        "from_date": c.from_date.isoformat(),
        "to_date": c.to_date.isoformat(),
    }
