"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AssignmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not AssignmentStatus.ACTIVE


TERMINAL_STATUSES = frozenset({AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED})
