from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.locks import KeyedLock
from .model import AttendanceRecord
from .store import AttendanceSessionStore

logger = logging.getLogger(__name__)


class SessionReconciler:
    """Closes out sessions left open on an earlier day.

    Every open session of the given day becomes NULLIFIED: it no longer counts
    toward hours and can never be completed by a later clock-out.
    """

    def __init__(self, store: AttendanceSessionStore, *, locks: Optional[KeyedLock] = None):
        self._store = store
        self._locks = locks or KeyedLock()

    def nullify_incomplete_sessions(
        self, student_id: str, practicum_id: str, before_date: date
    ) -> Optional[AttendanceRecord]:
        with self._locks.hold((str(student_id), str(practicum_id), before_date)):
            record = self._store.find(student_id, practicum_id, before_date)
            if record is None:
                return None

            open_kinds = [slot.kind for slot in record.sessions if slot.is_open]
            if not open_kinds:
                return record

            updated = self._store.nullify_sessions(record, open_kinds)
            logger.info(
                "Nullified %s session(s) for student %s practicum %s on %s",
                ", ".join(k.value for k in open_kinds),
                student_id,
                practicum_id,
                before_date,
            )
            return updated
