from __future__ import annotations

import json
from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ApprovalStatus, AttendanceStatus, Remark, SessionKind, SessionState, SESSION_ORDER
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, translate_integrity_errors
from .model import AgencySnapshot, AttendanceRecord, ClockMeta, SessionSlot
from .repository import AttendanceRepository

_SESSION_SUFFIXES = ("state", "time_in", "time_out", "in_remark", "out_remark", "in_meta", "out_meta")

_BASE_COLUMNS = [
    "student_id", "practicum_id", "work_date", "day",
    "time_in", "time_out", "session_type", "hours", "lunch_hours",
    "status", "approval_status", "remarks",
    "agency_name", "agency_location", "branch_type",
    "opening_time", "closing_time", "lunch_start_time", "lunch_end_time", "operating_days",
]
_SESSION_COLUMNS = [f"{kind.value}_{suffix}" for kind in SESSION_ORDER for suffix in _SESSION_SUFFIXES]
_DATA_COLUMNS = _BASE_COLUMNS + _SESSION_COLUMNS
_SELECT = "SELECT record_id, version, " + ", ".join(_DATA_COLUMNS) + " FROM attendance_records"


def _meta_to_json(meta: Optional[ClockMeta]) -> Optional[str]:
    if meta is None:
        return None
    return json.dumps(
        {
            "location_type": meta.location_type,
            "device_type": meta.device_type,
            "device_unit": meta.device_unit,
            "mac_address": meta.mac_address,
            "latitude": meta.latitude,
            "longitude": meta.longitude,
            "address": meta.address,
            "photo_url": meta.photo_url,
        }
    )


def _meta_from_json(value: Any) -> Optional[ClockMeta]:
    if not value:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    data = json.loads(value) if isinstance(value, str) else dict(value)
    return ClockMeta(**{k: data.get(k) for k in ClockMeta.__dataclass_fields__})


def _remark(value: Optional[str]) -> Optional[Remark]:
    return Remark(value) if value else None


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _slot_params(slot: SessionSlot) -> List[Any]:
    return [
        slot.state.value,
        slot.time_in,
        slot.time_out,
        slot.in_remark.value if slot.in_remark else None,
        slot.out_remark.value if slot.out_remark else None,
        _meta_to_json(slot.in_meta),
        _meta_to_json(slot.out_meta),
    ]


def _record_params(record: AttendanceRecord) -> List[Any]:
    snap = record.snapshot
    params: List[Any] = [
        record.student_id,
        record.practicum_id,
        record.work_date,
        record.day,
        record.time_in,
        record.time_out,
        record.session_type.value if record.session_type else None,
        record.hours,
        record.lunch_hours,
        record.status.value,
        record.approval_status.value,
        record.remarks,
        snap.agency_name,
        snap.agency_location,
        snap.branch_type,
        snap.opening_time,
        snap.closing_time,
        snap.lunch_start_time,
        snap.lunch_end_time,
        snap.operating_days,
    ]
    for kind in SESSION_ORDER:
        params.extend(_slot_params(record.session(kind)))
    return params


def _row_to_slot(r: Dict[str, Any], kind: SessionKind) -> SessionSlot:
    p = kind.value
    return SessionSlot(
        kind=kind,
        state=SessionState(r.get(f"{p}_state") or SessionState.EMPTY.value),
        time_in=r.get(f"{p}_time_in"),
        time_out=r.get(f"{p}_time_out"),
        in_remark=_remark(r.get(f"{p}_in_remark")),
        out_remark=_remark(r.get(f"{p}_out_remark")),
        in_meta=_meta_from_json(r.get(f"{p}_in_meta")),
        out_meta=_meta_from_json(r.get(f"{p}_out_meta")),
    )


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        student_id=str(r["student_id"]),
        practicum_id=str(r["practicum_id"]),
        work_date=r["work_date"],
        day=r["day"],
        morning=_row_to_slot(r, SessionKind.MORNING),
        afternoon=_row_to_slot(r, SessionKind.AFTERNOON),
        overtime=_row_to_slot(r, SessionKind.OVERTIME),
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        session_type=SessionKind(r["session_type"]) if r.get("session_type") else None,
        hours=_to_float(r.get("hours")) or 0.0,
        lunch_hours=_to_float(r.get("lunch_hours")),
        status=AttendanceStatus(r["status"]),
        approval_status=ApprovalStatus(r["approval_status"]),
        remarks=r.get("remarks"),
        snapshot=AgencySnapshot(
            agency_name=r.get("agency_name"),
            agency_location=r.get("agency_location"),
            branch_type=r.get("branch_type"),
            opening_time=normalize_mysql_time(r.get("opening_time")),
            closing_time=normalize_mysql_time(r.get("closing_time")),
            lunch_start_time=normalize_mysql_time(r.get("lunch_start_time")),
            lunch_end_time=normalize_mysql_time(r.get("lunch_end_time")),
            operating_days=r.get("operating_days"),
        ),
        version=int(r.get("version") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_key(self, student_id: str, practicum_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE student_id=%s AND practicum_id=%s AND work_date=%s",
                (student_id, practicum_id, work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def exists(self, student_id: str, practicum_id: str, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_records
                WHERE student_id=%s AND practicum_id=%s AND work_date=%s
                """,
                (student_id, practicum_id, work_date),
            )
            return fetchone(cur) is not None

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        columns = ", ".join(_DATA_COLUMNS)
        placeholders = ", ".join(["%s"] * len(_DATA_COLUMNS))
        message = f"Attendance for {record.student_id}/{record.practicum_id} on {record.work_date} already exists"
        with translate_integrity_errors(message):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO attendance_records(version, {columns}) VALUES(1, {placeholders})",
                    tuple(_record_params(record)),
                )
                return replace(record, record_id=int(cur.lastrowid), version=1)

    def update(self, record: AttendanceRecord) -> AttendanceRecord:
        assignments = ", ".join(f"{col}=%s" for col in _DATA_COLUMNS)
        params = _record_params(record) + [int(record.record_id), int(record.version)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {assignments}, version=version+1
                WHERE record_id=%s AND version=%s
                """,
                tuple(params),
            )
            if cur.rowcount == 0:
                raise ConflictError("Attendance record was modified concurrently; please retry")
            return replace(record, version=record.version + 1)

    def list_for_student(
        self,
        student_id: str,
        *,
        practicum_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["student_id=%s"]
        params: list[object] = [student_id]

        if practicum_id is not None:
            clauses.append("practicum_id=%s")
            params.append(practicum_id)
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY work_date ASC", tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]
