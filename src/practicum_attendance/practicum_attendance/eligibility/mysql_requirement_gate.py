from __future__ import annotations

from ..core.exceptions import AuthorizationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .gate import NOT_ELIGIBLE_MESSAGE


class MySQLRequirementGate:
    """Students clock in/out once a requirement is submitted.

    An instructor of any of the student's sections can waive the rule with
    `allow_login_without_requirements`.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _instructor_allows(self, cur, student_id: str) -> bool:
        cur.execute(
            """
            SELECT COUNT(*) AS cnt
            FROM student_enrollments e
            JOIN sections s ON s.section_id = e.section_id
            JOIN users u ON u.user_id = s.instructor_id
            WHERE e.student_id=%s AND u.allow_login_without_requirements = 1
            """,
            (student_id,),
        )
        r = fetchone(cur)
        return bool(r and int(r["cnt"]) > 0)

    def _submitted_requirements(self, cur, student_id: str) -> int:
        cur.execute(
            """
            SELECT COUNT(*) AS cnt
            FROM requirements
            WHERE student_id=%s AND status IN ('submitted', 'approved')
            """,
            (student_id,),
        )
        r = fetchone(cur)
        return int(r["cnt"]) if r else 0

    def ensure_can_clock(self, student_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if self._instructor_allows(cur, student_id):
                return
            if self._submitted_requirements(cur, student_id) == 0:
                raise AuthorizationError(NOT_ELIGIBLE_MESSAGE)
