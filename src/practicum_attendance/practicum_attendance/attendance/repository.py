from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_key(self, student_id: str, practicum_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def exists(self, student_id: str, practicum_id: str, work_date: date) -> bool:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a new record.

        Returns the stored record (id assigned, version 1). Raises
        DuplicateRecordError when the (student, practicum, date) key exists.
        """

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> AttendanceRecord:
        """Persist a modified record if its version is still current.

        Returns the stored record with version incremented. Raises ConflictError
        when another writer updated the row first.
        """

        raise NotImplementedError

    def list_for_student(
        self,
        student_id: str,
        *,
        practicum_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by work_date ascending."""

        raise NotImplementedError
