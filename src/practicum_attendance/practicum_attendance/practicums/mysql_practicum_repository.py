from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..agencies.model import Agency
from ..core.enums import PracticumStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Practicum
from .repository import PracticumRepository

_SELECT = """
    SELECT
        p.practicum_id, p.student_id, p.agency_id, p.status, p.start_date, p.end_date,
        a.name AS agency_name, a.address AS agency_address, a.branch_type,
        a.opening_time, a.closing_time, a.lunch_start_time, a.lunch_end_time,
        a.operating_days
    FROM practicums p
    LEFT JOIN agencies a ON a.agency_id = p.agency_id
"""


def _row_to_practicum(r: Dict[str, Any]) -> Practicum:
    agency = None
    if r.get("agency_id") and r.get("agency_name") is not None:
        raw_days = r.get("operating_days") or ""
        agency = Agency(
            agency_id=str(r["agency_id"]),
            name=r["agency_name"],
            address=r.get("agency_address"),
            branch_type=r.get("branch_type"),
            opening_time=normalize_mysql_time(r.get("opening_time")),
            closing_time=normalize_mysql_time(r.get("closing_time")),
            lunch_start_time=normalize_mysql_time(r.get("lunch_start_time")),
            lunch_end_time=normalize_mysql_time(r.get("lunch_end_time")),
            operating_days=tuple(d.strip() for d in str(raw_days).split(",") if d.strip()),
        )
    return Practicum(
        practicum_id=str(r["practicum_id"]),
        student_id=str(r["student_id"]),
        agency_id=str(r["agency_id"]) if r.get("agency_id") else None,
        status=PracticumStatus(r["status"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        agency=agency,
    )


class MySQLPracticumRepository(PracticumRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, practicum_id: str) -> Optional[Practicum]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.practicum_id=%s", (practicum_id,))
            r = fetchone(cur)
            return _row_to_practicum(r) if r else None

    def list_active_on(self, day: date) -> Sequence[Practicum]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE p.status=%s AND p.start_date <= %s AND p.end_date >= %s
                ORDER BY p.practicum_id
                """,
                (PracticumStatus.ACTIVE.value, day, day),
            )
            return [_row_to_practicum(r) for r in fetchall(cur)]
