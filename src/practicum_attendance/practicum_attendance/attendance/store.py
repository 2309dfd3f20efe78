from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from ..agencies.model import Agency
from ..common.datetime_utils import weekday_name
from ..core.enums import ApprovalStatus, AttendanceStatus, SessionKind, SessionState
from ..core.exceptions import ConflictError
from .model import (
    AgencySnapshot,
    AttendanceRecord,
    ClockEvent,
    compute_hours,
    compute_lunch_hours,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Day statuses owned by other processes; a clock-out does not overwrite them.
_PRESERVED_STATUSES = frozenset({AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED})


class AttendanceSessionStore:
    """Owns the daily attendance record and its session transitions.

    Callers serialize writes per (student, practicum, date); the repository's
    unique key and version column guard against writers in other processes.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def find(self, student_id: str, practicum_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_key(student_id, practicum_id, work_date)

    def find_or_create(
        self,
        student_id: str,
        practicum_id: str,
        work_date: date,
        *,
        agency: Optional[Agency] = None,
    ) -> AttendanceRecord:
        """Existing record for the day, or a new unsaved one.

        A new record is only persisted by the first successful write, so a
        rejected clock event never leaves an empty row behind.
        """
        record = self.find(student_id, practicum_id, work_date)
        if record is not None:
            return record
        return AttendanceRecord(
            record_id=None,
            student_id=str(student_id),
            practicum_id=str(practicum_id),
            work_date=work_date,
            day=weekday_name(work_date),
            status=AttendanceStatus.PRESENT,
            snapshot=AgencySnapshot.from_agency(agency),
        )

    def record_absence(
        self,
        student_id: str,
        practicum_id: str,
        work_date: date,
        *,
        agency: Optional[Agency] = None,
    ) -> AttendanceRecord:
        """Insert an absent, zero-hour, pending record.

        Raises DuplicateRecordError when any record already exists for the key.
        """
        record = AttendanceRecord(
            record_id=None,
            student_id=str(student_id),
            practicum_id=str(practicum_id),
            work_date=work_date,
            day=weekday_name(work_date),
            hours=0.0,
            status=AttendanceStatus.ABSENT,
            approval_status=ApprovalStatus.PENDING,
            snapshot=AgencySnapshot.from_agency(agency),
        )
        return self._attendance.create(record)

    def exists(self, student_id: str, practicum_id: str, work_date: date) -> bool:
        return self._attendance.exists(student_id, practicum_id, work_date)

    def apply_clock_in(
        self,
        record: AttendanceRecord,
        session: SessionKind,
        event: ClockEvent,
        *,
        note: Optional[str] = None,
        abandon: Iterable[SessionKind] = (),
    ) -> AttendanceRecord:
        """Open `session`; sessions listed in `abandon` are nullified in the same write."""
        target = record.session(session)
        if (
            session == SessionKind.OVERTIME
            and target.state == SessionState.EMPTY
            and not (record.morning.is_complete and record.afternoon.is_complete)
        ):
            raise ConflictError(
                "You must complete both morning and afternoon sessions before clocking in for overtime."
            )

        base = record
        for kind in abandon:
            base = base.with_session(base.session(kind).nullified())
        slot = base.session(session).opened(event.at, event.remark, event.meta)
        updated = replace(
            base.with_session(slot),
            time_in=event.at,
            session_type=session,
            approval_status=ApprovalStatus.APPROVED,
            remarks=note if note is not None else record.remarks,
        )
        if base is not record:
            updated = replace(updated, hours=compute_hours(updated), lunch_hours=compute_lunch_hours(updated))
        return self._save(updated)

    def apply_clock_out(
        self,
        record: AttendanceRecord,
        session: SessionKind,
        event: ClockEvent,
        *,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        slot = record.session(session).closed(event.at, event.remark, event.meta)
        updated = replace(
            record.with_session(slot),
            time_out=event.at,
            session_type=session,
            approval_status=ApprovalStatus.APPROVED,
            remarks=note if note is not None else record.remarks,
        )
        status = updated.status if updated.status in _PRESERVED_STATUSES else AttendanceStatus.PRESENT
        updated = replace(
            updated,
            status=status,
            hours=compute_hours(updated),
            lunch_hours=compute_lunch_hours(updated),
        )
        return self._save(updated)

    def nullify_session(self, record: AttendanceRecord, session: SessionKind) -> AttendanceRecord:
        return self.nullify_sessions(record, [session])

    def nullify_sessions(self, record: AttendanceRecord, sessions: Iterable[SessionKind]) -> AttendanceRecord:
        updated = record
        for kind in sessions:
            updated = updated.with_session(updated.session(kind).nullified())
        if updated is record:
            return record
        updated = replace(
            updated,
            hours=compute_hours(updated),
            lunch_hours=compute_lunch_hours(updated),
        )
        return self._save(updated)

    def _save(self, record: AttendanceRecord) -> AttendanceRecord:
        if record.record_id is None:
            stored = self._attendance.create(record)
            logger.debug("Created attendance record %s for %s on %s", stored.record_id, stored.student_id, stored.work_date)
            return stored
        return self._attendance.update(record)
