"""AssignmentFilter value object — optional equality filters for list queries."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.value_objects.enums import AssignmentStatus


@dataclass(frozen=True)
class AssignmentFilter:
    device_id: str | None = None
    survey_id: str | None = None
    status: AssignmentStatus | None = None

    def matches(self, assignment) -> bool:
        if self.device_id is not None and assignment.device_id != self.device_id:
            return False
        if self.survey_id is not None and assignment.survey_id != self.survey_id:
            return False
        if self.status is not None and assignment.status != self.status:
            return False
        return True
