from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from typing import Dict, Optional, Sequence, Tuple

from ..core.exceptions import ConflictError, DuplicateRecordError, NotFoundError
from .model import AttendanceRecord
from .repository import AttendanceRepository

_Key = Tuple[str, str, date]


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store with the same key and version rules as the MySQL table."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_key: Dict[_Key, AttendanceRecord] = {}
        self._next_id = 0

    def get_for_key(self, student_id: str, practicum_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_key.get((str(student_id), str(practicum_id), work_date))

    def exists(self, student_id: str, practicum_id: str, work_date: date) -> bool:
        return self.get_for_key(student_id, practicum_id, work_date) is not None

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            if record.key in self._by_key:
                raise DuplicateRecordError(
                    f"Attendance for {record.student_id}/{record.practicum_id} on {record.work_date} already exists"
                )
            self._next_id += 1
            stored = replace(record, record_id=self._next_id, version=1)
            self._by_key[record.key] = stored
            return stored

    def update(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            current = self._by_key.get(record.key)
            if current is None or current.record_id != record.record_id:
                raise NotFoundError(f"Attendance record {record.record_id} not found")
            if current.version != record.version:
                raise ConflictError("Attendance record was modified concurrently; please retry")
            stored = replace(record, version=record.version + 1)
            self._by_key[record.key] = stored
            return stored

    def list_for_student(
        self,
        student_id: str,
        *,
        practicum_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        with self._lock:
            rows = [
                r
                for r in self._by_key.values()
                if r.student_id == str(student_id)
                and (practicum_id is None or r.practicum_id == str(practicum_id))
                and (start_date is None or r.work_date >= start_date)
                and (end_date is None or r.work_date <= end_date)
            ]
        rows.sort(key=lambda r: r.work_date)
        return rows

    def all(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            return list(self._by_key.values())
