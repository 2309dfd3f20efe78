from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..agencies.model import Agency
from ..core.enums import PracticumStatus


@dataclass(frozen=True)
class Practicum:
    """A student's placement at an agency for a date range."""

    practicum_id: str
    student_id: str
    agency_id: Optional[str]
    status: PracticumStatus
    start_date: date
    end_date: date
    agency: Optional[Agency] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def is_active_on(self, day: date) -> bool:
        return self.status == PracticumStatus.ACTIVE and self.covers(day)
