"""DateRange value object — immutable inclusive [start, end] pair of dates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from app.domain.errors import ValidationError


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(
                "from_date must not be after to_date",
                details={"from_date": self.start.isoformat(), "to_date": self.end.isoformat()},
            )

    def overlaps(self, other: "DateRange") -> bool:
        """Inclusive overlap: ranges sharing a single boundary day overlap."""
        return self.start <= other.end and other.start <= self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1
